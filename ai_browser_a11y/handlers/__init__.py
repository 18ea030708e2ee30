"""Page-level operation handlers."""

from .act import ActHandler
from .base import BaseHandler
from .observe import ObserveHandler

__all__ = ["ActHandler", "BaseHandler", "ObserveHandler"]
