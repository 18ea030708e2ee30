"""Base handler class for page-level operations."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..utils.logger import A11yLogger

if TYPE_CHECKING:
    from ..core.page import A11yPage
    from ..llm import LLMProvider

T = TypeVar("T")


class BaseHandler(ABC, Generic[T]):
    """Common logging and collaborators for handlers."""

    def __init__(self, logger: A11yLogger, llm_provider: "LLMProvider"):
        self.logger = logger
        self.llm_provider = llm_provider

    @abstractmethod
    async def handle(self, page: "A11yPage", *args: Any, **kwargs: Any) -> T:
        pass

    def _log_debug(self, message: str, **kwargs: Any) -> None:
        self.logger.debug(f"handler:{self.__class__.__name__}", message, **kwargs)

    def _log_info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(f"handler:{self.__class__.__name__}", message, **kwargs)

    def _log_warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warn(f"handler:{self.__class__.__name__}", message, **kwargs)

    def _log_error(self, message: str, **kwargs: Any) -> None:
        self.logger.error(f"handler:{self.__class__.__name__}", message, **kwargs)
