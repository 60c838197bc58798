# uireuse/element.py
"""
@file element.py
@brief Resolved element wrapper around a driver handle.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .context import ActionContextManager
from .descriptor import ElementDescriptor
from .interfaces import IElementHandle, Readiness


@dataclass(frozen=True)
class ElementMeta:
    """
    Metadata describing how an element was resolved.
    Used for debugging and error reporting.
    """
    descriptor: Optional[ElementDescriptor]
    index: int = 0
    readiness: Readiness = Readiness.EXISTS
    match_count: int = 1
    elapsed: float = 0.0

    @property
    def description(self) -> str:
        if self.descriptor is None:
            return "<active element>"
        return self.descriptor.describe()


class ResolvedElement:
    """
    Handle bound to one concrete element at the moment of resolution.

    Not cached across retries: the page may re-render and detach the node,
    so every primitive resolves again instead of reusing an instance.
    """

    def __init__(self, handle: IElementHandle, meta: Optional[ElementMeta] = None):
        self._handle = handle
        self._meta = meta or ElementMeta(descriptor=None)

    @property
    def handle(self) -> IElementHandle:
        return self._handle

    @property
    def meta(self) -> ElementMeta:
        return self._meta

    @property
    def descriptor(self) -> Optional[ElementDescriptor]:
        return self._meta.descriptor

    @property
    def description(self) -> str:
        return self._meta.description

    @property
    def id(self) -> Optional[str]:
        return self._handle.get_attribute("id")

    @property
    def tag_name(self) -> str:
        return self._handle.tag_name

    # --- State Queries ---

    def exists(self) -> bool:
        return self._handle.exists()

    def is_visible(self) -> bool:
        return self._handle.is_visible()

    def is_clickable(self) -> bool:
        return self._handle.is_clickable()

    def is_selected(self) -> bool:
        return self._handle.is_selected()

    def has_class(self, class_name: str) -> bool:
        classes = (self._handle.get_attribute("class") or "").split()
        return class_name in classes

    # --- Actions ---

    def click(self) -> ResolvedElement:
        with ActionContextManager.action("element.click", target=self.description):
            self._handle.click()
        return self

    def set_value(self, value: str) -> ResolvedElement:
        with ActionContextManager.action("element.set_value", target=self.description):
            self._handle.set_value(value)
        return self

    def clear_value(self) -> ResolvedElement:
        with ActionContextManager.action("element.clear_value", target=self.description):
            self._handle.clear_value()
        return self

    def scroll_into_view(self) -> ResolvedElement:
        self._handle.scroll_into_view()
        return self

    def get_value(self) -> str:
        return self._handle.get_value()

    def get_text(self) -> str:
        return self._handle.get_text()

    def get_attribute(self, name: str) -> Optional[str]:
        return self._handle.get_attribute(name)

    def __repr__(self) -> str:
        return f"ResolvedElement({self.description}, index={self._meta.index})"
