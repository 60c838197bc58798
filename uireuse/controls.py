# uireuse/controls.py
"""
@file controls.py
@brief Control-specific handling for clear, fill and popup selection.

Every ControlKind maps to exactly one clear handler and one input tag; the
tables are checked for completeness at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional

from .config import Conventions
from .descriptor import ControlKind, ElementDescriptor, xpath_literal

if TYPE_CHECKING:
    from .interaction import UserInteraction


@dataclass(frozen=True)
class ClearTarget:
    """What a clear operates on once focus and the container id are known."""
    descriptor: Optional[ElementDescriptor]
    container_id: str
    index: int
    timeout: Optional[float]


def _blank(interaction: UserInteraction, target: ClearTarget) -> int:
    return interaction.driver.clear_native_inputs(
        target.container_id, interaction.conventions.token_selector
    )


def clear_field(interaction: UserInteraction, target: ClearTarget) -> None:
    """Plain and multi-line fields: blanking the native value is enough."""
    _blank(interaction, target)


def clear_tokenizer(interaction: UserInteraction, target: ClearTarget) -> None:
    """
    Fields that may hold token chips: blank the raw text, then remove all
    tokens at once with select-all + Backspace scoped to the control.
    """
    tokens = _blank(interaction, target)
    if tokens:
        interaction.select_all(target.descriptor, target.index, target.timeout)
        interaction.press_backspace()


ClearHandler = Callable[["UserInteraction", ClearTarget], None]

CLEAR_HANDLERS: Dict[Optional[ControlKind], ClearHandler] = {
    ControlKind.PLAIN_FIELD: clear_field,
    ControlKind.MULTILINE_FIELD: clear_field,
    ControlKind.SINGLE_SELECT: clear_field,
    ControlKind.TOKENIZER_FIELD: clear_tokenizer,
    ControlKind.MULTI_SELECT: clear_tokenizer,
    None: clear_tokenizer,
}

INPUT_TAGS: Dict[Optional[ControlKind], str] = {
    ControlKind.PLAIN_FIELD: "input",
    ControlKind.MULTILINE_FIELD: "textarea",
    ControlKind.SINGLE_SELECT: "input",
    ControlKind.TOKENIZER_FIELD: "input",
    ControlKind.MULTI_SELECT: "input",
    None: "input",
}

NATIVE_VALUE_TAGS = frozenset({"input", "textarea"})

# Token removal is scoped by the container id, so these controls cannot be
# cleared through the element handle alone.
TOKEN_CONTROLS = frozenset({ControlKind.TOKENIZER_FIELD, ControlKind.MULTI_SELECT})

for _table_name, _table in (("CLEAR_HANDLERS", CLEAR_HANDLERS), ("INPUT_TAGS", INPUT_TAGS)):
    _missing = set(ControlKind) - set(_table)
    if _missing:
        raise RuntimeError(f"{_table_name} has no entry for {sorted(k.name for k in _missing)}")


def clear_handler(control: Optional[ControlKind]) -> ClearHandler:
    return CLEAR_HANDLERS[control]


def input_tag(control: Optional[ControlKind]) -> str:
    """Tag of the native node that holds the value of a control."""
    return INPUT_TAGS[control]


# --- popup items ---

def popup_item(value: str, conventions: Optional[Conventions] = None) -> ElementDescriptor:
    """List item labelled `value` in an open combo box popup."""
    conv = conventions or Conventions.current()
    return ElementDescriptor.xpath(
        conv.popup_item_xpath.format(value=xpath_literal(value)),
        parent=ElementDescriptor.css(conv.popup_list_css, name="popup list"),
        name=f"popup item '{value}'",
    )


def popup_checkbox(value: str, conventions: Optional[Conventions] = None) -> ElementDescriptor:
    """Checkbox inside the list item labelled `value` of a multi-select popup."""
    conv = conventions or Conventions.current()
    return ElementDescriptor.css(
        conv.checkbox_css,
        parent=popup_item(value, conv),
        name=f"checkbox of popup item '{value}'",
    )


def select_item(value: str, conventions: Optional[Conventions] = None) -> ElementDescriptor:
    """Option labelled `value` in an open select box list."""
    conv = conventions or Conventions.current()
    return ElementDescriptor.xpath(
        conv.select_item_xpath.format(value=xpath_literal(value)),
        parent=ElementDescriptor.css(conv.select_list_css, name="select list"),
        name=f"select item '{value}'",
    )


def sibling(container_id: str, suffix: str) -> ElementDescriptor:
    """Affordance whose id is the control id plus a fixed suffix."""
    return ElementDescriptor.by_id(f"{container_id}{suffix}")
