"""ActHandler: perform an action on an observed (or to-be-observed) element."""

from typing import TYPE_CHECKING, Dict, List, Union

from ..llm.prompt import SUPPORTED_ACTIONS, build_act_observe_prompt
from ..types import ActOptions, ActResult, ObserveOptions, ObserveResult
from .base import BaseHandler
from .observe import ObserveHandler
from .utils.act_utils import perform_playwright_method

if TYPE_CHECKING:
    from ..core.page import A11yPage


def substitute_variables(arguments: List[str], variables: Dict[str, str]) -> List[str]:
    """Replace ``%name%`` placeholders in action arguments."""
    substituted = []
    for arg in arguments:
        for key, value in variables.items():
            arg = arg.replace(f"%{key}%", value)
        substituted.append(arg)
    return substituted


class ActHandler(BaseHandler[ActResult]):
    """Executes one action, observing first when given an instruction."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.observe_handler = ObserveHandler(self.logger, self.llm_provider)

    async def handle(self, page: "A11yPage", action: Union[str, ActOptions, ObserveResult]) -> ActResult:
        if isinstance(action, ObserveResult):
            return await self._execute(page, action, {})

        options = ActOptions(action=action) if isinstance(action, str) else action
        results = await self.observe_handler.handle(page, ObserveOptions(
            instruction=build_act_observe_prompt(options.action, SUPPORTED_ACTIONS, options.variables),
            model_name=options.model_name,
            model_client_options=options.model_client_options,
            dom_settle_timeout_ms=options.dom_settle_timeout_ms,
            return_action=True,
        ))

        if not results:
            self._log_warning("no element found for action", action=options.action)
            return ActResult(
                success=False,
                message=f"No element found for action: {options.action}",
                action=options.action,
            )

        return await self._execute(page, results[0], options.variables)

    async def _execute(self, page: "A11yPage", observed: ObserveResult, variables: Dict[str, str]) -> ActResult:
        method = observed.method or "click"
        arguments = substitute_variables(observed.arguments, variables)

        self._log_info("performing action", method=method, selector=observed.selector)
        await perform_playwright_method(page.page, method, arguments, observed.selector, self.logger, page.config)
        await page.wait_for_settled_dom()

        return ActResult(
            success=True,
            message=f"Action [{method}] performed successfully on selector: {observed.selector}",
            action=observed.description,
            selector=observed.selector,
            method=method,
        )
