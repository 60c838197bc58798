# uireuse/resolver.py
"""
@file resolver.py
@brief Resolves element descriptors to live elements by polling the driver.
"""

from __future__ import annotations
import time
from typing import Any, Dict, List, Optional

from .config import Conventions, TimeConfig
from .context import ActionContextManager
from .descriptor import ElementDescriptor
from .element import ElementMeta, ResolvedElement
from .exceptions import MissingIdError, NotFoundError, TimeoutError
from .interfaces import IElementHandle, IUIDriver, Readiness
from .waits import wait_until


def _is_ready(handle: IElementHandle, readiness: Readiness) -> bool:
    if readiness is Readiness.EXISTS:
        return handle.exists()
    if readiness is Readiness.VISIBLE:
        return handle.exists() and handle.is_visible()
    if readiness is Readiness.CLICKABLE:
        return handle.exists() and handle.is_visible() and handle.is_clickable()
    raise ValueError(f"Unknown readiness: {readiness}")


class Resolver:
    """
    Resolves descriptors against the live page.

    Resolution polls until the match at the requested index reaches the
    requested readiness. It never mutates the page.
    """

    def __init__(self, driver: IUIDriver, conventions: Optional[Conventions] = None):
        """
        @param driver Driver binding used for every query
        @param conventions Control naming conventions (current ones if None)
        """
        self.driver = driver
        self._conventions = conventions

    @property
    def conventions(self) -> Conventions:
        return self._conventions or Conventions.current()

    @property
    def timeout(self) -> float:
        """Default timeout from configuration."""
        return TimeConfig.current().resolve_element.timeout

    @property
    def interval(self) -> float:
        """Polling interval from configuration."""
        return TimeConfig.current().resolve_element.interval

    def query(self, descriptor: ElementDescriptor) -> List[IElementHandle]:
        """
        Single, non-waiting query. Parent descriptors are resolved first and
        candidates are collected under every parent match, in document order.
        An element reached through several nested parent matches is listed once.
        """
        if descriptor.parent is None:
            return list(self.driver.find_elements(descriptor.strategy, descriptor.value))

        matches: List[IElementHandle] = []
        seen = set()
        for root in self.query(descriptor.parent):
            for handle in self.driver.find_elements(descriptor.strategy, descriptor.value, root=root):
                if handle in seen:
                    continue
                seen.add(handle)
                matches.append(handle)
        return matches

    def resolve(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
        readiness: Readiness = Readiness.VISIBLE,
    ) -> ResolvedElement:
        """
        Resolve a descriptor to one element.

        @param descriptor What to look for
        @param index Zero-based position among the matches
        @param timeout Override timeout (uses configuration if None)
        @param readiness Required readiness of the element
        @return ResolvedElement bound to the match
        @throws NotFoundError if no match ever existed at `index`
        @throws TimeoutError if the match never reached `readiness`
        """
        if index < 0:
            raise ValueError(f"index must be >= 0, got {index}")

        config = TimeConfig.current().resolve_element
        effective_timeout = timeout if timeout is not None else config.timeout
        description = descriptor.describe()
        state: Dict[str, Any] = {"matched": False, "count": 0}
        start = time.monotonic()

        def poll() -> Optional[IElementHandle]:
            handles = self.query(descriptor)
            state["count"] = len(handles)
            if index >= len(handles):
                return None
            state["matched"] = True
            handle = handles[index]
            return handle if _is_ready(handle, readiness) else None

        with ActionContextManager.action("resolve", target=description, readiness=readiness.value):
            try:
                handle = wait_until(
                    poll,
                    timeout=effective_timeout,
                    interval=config.interval,
                    description=f"{description}[{index}] to be {readiness.value}",
                    stage="resolve",
                )
            except TimeoutError as e:
                if not state["matched"]:
                    last_error = None
                    if e.original_exception is not None:
                        last_error = f"{type(e.original_exception).__name__}: {e.original_exception}"
                    raise NotFoundError(
                        description,
                        timeout=effective_timeout,
                        index=index,
                        match_count=state["count"],
                        last_error=last_error,
                    ) from e
                raise

        meta = ElementMeta(
            descriptor=descriptor,
            index=index,
            readiness=readiness,
            match_count=state["count"],
            elapsed=time.monotonic() - start,
        )
        return ResolvedElement(handle, meta=meta)

    def resolve_by_id(
        self,
        element_id: str,
        timeout: Optional[float] = None,
        readiness: Readiness = Readiness.VISIBLE,
    ) -> ResolvedElement:
        """Resolve the element with exactly this id."""
        return self.resolve(ElementDescriptor.by_id(element_id), 0, timeout, readiness)

    def element_id(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Id of the resolved element.

        @throws MissingIdError if the element carries no id
        """
        element = self.resolve(descriptor, index, timeout, Readiness.VISIBLE)
        element_id = element.id
        if not element_id:
            raise MissingIdError(descriptor.describe(), "derive the ids of its affordances")
        return element_id

    def scroll_to(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> ResolvedElement:
        """Resolve an element (existence only) and scroll it into view."""
        element = self.resolve(descriptor, index, timeout, Readiness.EXISTS)
        element.scroll_into_view()
        return element

    def exists(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Check whether an element exists, waiting up to `timeout`
        (the `exists_wait` setting when None).
        """
        config = TimeConfig.current().exists_wait
        effective_timeout = timeout if timeout is not None else config.timeout
        try:
            self.resolve(descriptor, index, effective_timeout, Readiness.EXISTS)
            return True
        except (NotFoundError, TimeoutError):
            return False

    def active_element(self) -> ResolvedElement:
        """The element currently holding input focus."""
        return ResolvedElement(self.driver.active_element())
