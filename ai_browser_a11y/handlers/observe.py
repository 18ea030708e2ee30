"""ObserveHandler: ask the model which elements of the page match an instruction."""

import json
import re
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..core.errors import LLMResponseError
from ..llm.prompt import (
    DEFAULT_OBSERVE_INSTRUCTION,
    build_observe_system_prompt,
    build_observe_user_message,
)
from ..types import ObserveElementSchema, ObserveOptions, ObserveResult
from .base import BaseHandler

if TYPE_CHECKING:
    from ..core.page import A11yPage

OUTLINE_LINE_RE = re.compile(r"^\s*\[([^\]]+)] ([^:]*?)(?:: (.*))?$")
CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


def index_outline(outline: str) -> Dict[str, Tuple[str, Optional[str]]]:
    """Map each label of an outline to its (role, name)."""
    index = {}
    for line in outline.split("\n"):
        match = OUTLINE_LINE_RE.match(line)
        if match:
            index[match.group(1)] = (match.group(2), match.group(3))
    return index


def parse_elements(content: str) -> List[Dict[str, Any]]:
    """
    Extract the raw element list from the model's reply.

    Accepts ``{"elements": [...]}`` or a bare list, optionally inside a
    markdown code fence.

    Raises:
        LLMResponseError: If the reply is not JSON of either shape
    """
    text = CODE_FENCE_RE.sub("", content.strip())
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"reply is not JSON: {e}", content) from e

    if isinstance(parsed, dict) and isinstance(parsed.get("elements"), list):
        return parsed["elements"]
    if isinstance(parsed, list):
        return parsed
    raise LLMResponseError("reply has no elements list", content)


class ObserveHandler(BaseHandler[List[ObserveResult]]):
    """
    Finds elements matching an instruction.

    The model only ever sees the combined outline of the page (all frames
    stitched together) and answers with encoded ids, which are resolved to
    page-absolute XPaths here.
    """

    async def handle(self, page: "A11yPage", options: ObserveOptions) -> List[ObserveResult]:
        instruction = options.instruction or DEFAULT_OBSERVE_INSTRUCTION
        self.logger.info("observation", "starting observation", instruction=instruction)

        await page.wait_for_settled_dom(options.dom_settle_timeout_ms)

        self.logger.info("observation", "Getting accessibility tree data")
        combined = await page.get_accessibility_tree_with_frames(options.selector)

        client = self.llm_provider.get_client(options.model_name, **(options.model_client_options or {}))
        messages = [
            build_observe_system_prompt(page.config.user_provided_instructions, options.return_action),
            build_observe_user_message(instruction, combined.combined_tree),
        ]
        response = await client.create_chat_completion(
            messages=messages,
            temperature=0.1,
            max_tokens=2000,
            response_format={"type": "json_object"},
        )

        outline = index_outline(combined.combined_tree)
        results = []
        for element in self._validate_elements(parse_elements(response.text)):
            xpath = combined.combined_xpath_map.get(element.elementId)
            if not xpath:
                self._log_warning("model returned an id absent from the page", element_id=element.elementId)
                continue

            role, name = outline.get(element.elementId, (None, None))
            results.append(ObserveResult(
                selector=f"xpath={xpath}",
                description=element.description,
                encoded_id=element.elementId,
                role=role,
                name=name,
                method=element.method if options.return_action else None,
                arguments=element.arguments if options.return_action else [],
            ))

        self.logger.info(
            "observation",
            "found elements",
            elements=json.dumps([r.model_dump(exclude_none=True) for r in results]),
        )
        return results

    def _validate_elements(self, raw_elements: List[Any]) -> List[ObserveElementSchema]:
        elements = []
        for raw in raw_elements:
            if not isinstance(raw, dict):
                self._log_debug("skipping non-object element", element=str(raw))
                continue
            try:
                elements.append(ObserveElementSchema(**raw))
            except ValidationError as e:
                self._log_debug("skipping invalid element", error=str(e))
        return elements
