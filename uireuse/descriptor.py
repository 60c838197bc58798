# uireuse/descriptor.py
"""
@file descriptor.py
@brief Element descriptors: which element a primitive targets.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

STRATEGIES = ("css", "xpath", "id")


class ControlKind(Enum):
    """
    Shape of the control behind a descriptor. Clear and fill pick their
    handling from this value.
    """
    PLAIN_FIELD = "plain_field"
    MULTILINE_FIELD = "multiline_field"
    TOKENIZER_FIELD = "tokenizer_field"
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"


@dataclass(frozen=True)
class ElementDescriptor:
    """
    Immutable description of the element(s) to target.

    `strategy` and `value` select candidates; when `parent` is given,
    candidates are searched inside every element the parent resolves to.
    `control` tells the clear/fill machinery what kind of control this is;
    None means "unknown", which is handled like a field that may carry tokens.
    """
    strategy: str
    value: str
    parent: Optional[ElementDescriptor] = None
    control: Optional[ControlKind] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown locator strategy: {self.strategy}. Use one of {STRATEGIES}")
        if not self.value:
            raise ValueError("ElementDescriptor.value must not be empty")

    @classmethod
    def css(cls, selector: str, **kwargs) -> ElementDescriptor:
        return cls("css", selector, **kwargs)

    @classmethod
    def xpath(cls, expression: str, **kwargs) -> ElementDescriptor:
        return cls("xpath", expression, **kwargs)

    @classmethod
    def by_id(cls, element_id: str, **kwargs) -> ElementDescriptor:
        return cls("id", element_id, **kwargs)

    def within(self, parent: ElementDescriptor) -> ElementDescriptor:
        """Copy of this descriptor scoped to `parent`."""
        return replace(self, parent=parent)

    def as_control(self, control: ControlKind) -> ElementDescriptor:
        return replace(self, control=control)

    def describe(self) -> str:
        """Human-readable description used in errors and logs."""
        if self.name:
            text = f"'{self.name}' ({self.strategy}={self.value!r})"
        else:
            text = f"{self.strategy}={self.value!r}"
        if self.parent is not None:
            text += f" within {self.parent.describe()}"
        return text

    def __str__(self) -> str:
        return self.describe()


def xpath_literal(value: str) -> str:
    """Quote `value` as an XPath 1.0 string literal, handling embedded quotes."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def css_string(value: str) -> str:
    """Quote `value` as a CSS string for attribute selectors."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
