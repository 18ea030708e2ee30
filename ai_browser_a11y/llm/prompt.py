"""Prompt builders for observe and act."""

import re
from typing import Dict, List, Optional

from ..types import LLMMessage

DEFAULT_OBSERVE_INSTRUCTION = (
    "Find elements that can be used for any future actions in the page. These may be "
    "navigation links, related pages, section/subsection links, buttons, or other "
    "interactive elements. Be comprehensive: if there are multiple elements that may be "
    "relevant for future actions, return all of them."
)

SUPPORTED_ACTIONS = [
    "click", "fill", "type", "press", "hover", "selectOption",
    "check", "uncheck", "focus", "blur", "scrollIntoView",
]

_JSON_ELEMENT_FIELDS = """      "elementId": "the ID string from the accessibility tree (e.g., '0-15'), never include square brackets",
      "description": "a description of the element and its purpose\""""

_JSON_ACTION_FIELDS = """,
      "method": "the playwright method to use (e.g., 'click', 'fill', 'press', 'selectOption', 'scrollIntoView')",
      "arguments": ["any", "arguments", "for", "the", "method"]"""


def build_user_instructions_string(user_provided_instructions: Optional[str] = None) -> str:
    if not user_provided_instructions:
        return ""

    return f"""

# Custom Instructions Provided by the User

Please keep the user's instructions in mind when performing actions. If the user's instructions are not relevant to the current task, ignore them.

User Instructions:
{user_provided_instructions}"""


def build_json_instruction(return_action: bool) -> str:
    """Describe the ``{"elements": [...]}`` reply format expected from the model."""
    fields = _JSON_ELEMENT_FIELDS + (_JSON_ACTION_FIELDS if return_action else "")
    return f"""

IMPORTANT: You must respond with a valid JSON object in this format:
{{
  "elements": [
    {{
{fields}
    }}
  ]
}}

Only return the JSON object, no other text."""


def build_observe_system_prompt(
    user_provided_instructions: Optional[str] = None,
    return_action: bool = True,
) -> LLMMessage:
    observe_system_prompt = """
You are helping the user automate the browser by finding elements based on what the user wants to observe in the page.

You will be given:
1. a instruction of elements to observe
2. a hierarchical accessibility tree showing the semantic structure of the page. The tree is a hybrid of the DOM and the accessibility tree.

Return an array of elements that match the instruction if they exist, otherwise return an empty array."""

    parts = [re.sub(r"\s+", " ", observe_system_prompt).strip()]
    user_instructions = build_user_instructions_string(user_provided_instructions)
    if user_instructions:
        parts.append(user_instructions)

    return LLMMessage(role="system", content="\n\n".join(parts) + build_json_instruction(return_action))


def build_observe_user_message(instruction: str, dom_elements: str) -> LLMMessage:
    return LLMMessage(role="user", content=f"instruction: {instruction}\nAccessibility Tree: \n{dom_elements}")


def build_act_observe_prompt(
    action: str,
    supported_actions: List[str],
    variables: Optional[Dict[str, str]] = None,
) -> str:
    """Instruction asking observe for the single element an action targets."""
    instruction = f"""Find the most relevant element to perform an action on given the following action: {action}.
  Provide an action for this element such as {', '.join(supported_actions)}, or any other playwright locator method. Remember that to users, buttons and links look the same in most cases.
  If the action is completely unrelated to a potential action to be taken on the page, return an empty array.
  ONLY return one action. If multiple actions are relevant, return the most relevant one.
  If the action implies a key press, e.g., 'press enter', 'press a', 'press space', etc., always choose the press method with the appropriate key as argument, e.g. 'a', 'Enter', 'Space'. Do not choose a click action on an on-screen keyboard. Capitalize the first character like 'Enter', 'Tab', 'Escape' only for special keys."""

    if variables:
        variable_names = ", ".join(f"%{key}%" for key in variables)
        instruction += (
            f" The following variables are available to use in the action: {variable_names}."
            " Fill the argument variables with the variable name."
        )

    return instruction
