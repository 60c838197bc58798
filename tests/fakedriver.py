# tests/fakedriver.py
"""
In-memory IUIDriver used by the interaction tests.

Supported css selectors: "tag", ".class", "#id", "tag.class". Anything else
(xpath, compound css) must be registered with FakeDriver.register().
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from uireuse.exceptions import InvalidElementStateError
from uireuse.interfaces import IElementHandle, IUIDriver, Key, KeyInput

VALUE_TAGS = ("input", "textarea")


class FakeNode(IElementHandle):
    """A node of the fake document."""

    def __init__(
        self,
        tag: str = "div",
        id: Optional[str] = None,
        classes: Sequence[str] = (),
        value: str = "",
        text: str = "",
        visible: bool = True,
        enabled: bool = True,
        covered: bool = False,
        attrs: Optional[Dict[str, str]] = None,
    ):
        self.tag = tag
        self.id = id
        self.classes = list(classes)
        self.value = value
        self.text = text
        self.visible = visible
        self.enabled = enabled
        self.covered = covered
        self.selected = False
        self.attrs = dict(attrs or {})
        self.attached = True
        self.parent: Optional["FakeNode"] = None
        self.children: List["FakeNode"] = []
        self.driver: Optional["FakeDriver"] = None
        self.focus_target: Optional["FakeNode"] = None
        self.click_errors: List[Exception] = []
        self.on_click = None
        self.write_failures = 0

    # --- tree ---

    def append(self, child: "FakeNode") -> "FakeNode":
        child.parent = self
        child.driver = self.driver
        self.children.append(child)
        for node in child.descendants():
            node.driver = self.driver
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None
        self.attached = False
        for node in self.descendants():
            node.attached = False

    def descendants(self) -> List["FakeNode"]:
        found: List["FakeNode"] = []
        for child in self.children:
            found.append(child)
            found.extend(child.descendants())
        return found

    def contains(self, other: "FakeNode") -> bool:
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def _record(self, action: str, *args: Any) -> None:
        if self.driver is not None:
            self.driver.calls.append((action, self.id or self.tag) + args)

    # --- IElementHandle ---

    def exists(self) -> bool:
        return self.attached

    def is_visible(self) -> bool:
        return self.attached and self.visible

    def is_visible_in_viewport(self) -> bool:
        return self.is_visible()

    def is_clickable(self) -> bool:
        return self.is_visible() and self.enabled and not self.covered

    def is_selected(self) -> bool:
        return self.selected

    def click(self) -> None:
        self._record("click")
        if self.click_errors:
            raise self.click_errors.pop(0)
        if self.driver is not None:
            self.driver.focused = self.focus_target or self
        if self.on_click is not None:
            self.on_click(self)

    def set_value(self, value: str) -> None:
        self._record("set_value", value)
        if self.tag not in VALUE_TAGS:
            raise InvalidElementStateError("set_value", f"<{self.tag}> does not hold a value")
        if self.write_failures > 0:
            self.write_failures -= 1
            return
        self.value = value

    def clear_value(self) -> None:
        self._record("clear_value")
        if self.tag not in VALUE_TAGS:
            raise InvalidElementStateError("clear_value", f"<{self.tag}> does not hold a value")
        self.value = ""

    def get_value(self) -> str:
        return self.value

    def get_text(self) -> str:
        return self.text

    def get_attribute(self, name: str) -> Optional[str]:
        if name == "id":
            return self.id
        if name == "class":
            return " ".join(self.classes) or None
        if name == "value":
            return self.value
        return self.attrs.get(name)

    @property
    def tag_name(self) -> str:
        return self.tag

    def scroll_into_view(self) -> None:
        self._record("scroll_into_view")

    def __repr__(self) -> str:
        return f"FakeNode(<{self.tag}> id={self.id!r})"


def _matches_css(node: FakeNode, selector: str) -> bool:
    if selector.startswith("#"):
        return node.id == selector[1:]
    if selector.startswith("."):
        return selector[1:] in node.classes
    if "." in selector:
        tag, cls = selector.split(".", 1)
        return node.tag == tag and cls in node.classes
    return node.tag == selector


class FakeDriver(IUIDriver):
    """Fake session: a document tree, a focus pointer and a call log."""

    def __init__(self, platform: str = "linux"):
        self.document = FakeNode("html")
        self.document.driver = self
        self.focused: Optional[FakeNode] = None
        self.calls: List[Tuple[Any, ...]] = []
        self._platform = platform
        self._registered: Dict[Tuple[str, str], List[FakeNode]] = {}
        self._all_selected = False

    def add(self, node: FakeNode, parent: Optional[FakeNode] = None) -> FakeNode:
        return (parent or self.document).append(node)

    def register(self, strategy: str, value: str, *nodes: FakeNode) -> None:
        """Make `nodes` the matches of a selector the fake cannot evaluate."""
        self._registered.setdefault((strategy, value), []).extend(nodes)

    def by_id(self, element_id: str) -> Optional[FakeNode]:
        for node in self.document.descendants():
            if node.id == element_id:
                return node
        return None

    def calls_of(self, action: str) -> List[Tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == action]

    # --- IUIDriver ---

    def find_elements(
        self,
        strategy: str,
        value: str,
        root: Optional[IElementHandle] = None,
    ) -> List[IElementHandle]:
        scope = root if isinstance(root, FakeNode) else self.document
        registered = self._registered.get((strategy, value))
        if registered is not None:
            return [n for n in registered if n.attached and scope.contains(n)]
        candidates = scope.descendants()
        if strategy == "id":
            return [n for n in candidates if n.id == value]
        if strategy == "css":
            return [n for n in candidates if _matches_css(n, value)]
        return []

    def active_element(self) -> IElementHandle:
        return self.focused or self.document

    def press_keys(self, keys: Sequence[KeyInput]) -> None:
        self.calls.append(("keys", tuple(keys)))
        if (Key.CONTROL in keys or Key.COMMAND in keys) and "a" in keys:
            self._all_selected = True
            return
        if Key.BACKSPACE in keys and self._all_selected:
            self._remove_tokens()
        self._all_selected = False

    def _remove_tokens(self) -> None:
        node = self.focused
        while node is not None:
            tokens = [n for n in node.descendants() if "sapMToken" in n.classes]
            if tokens:
                for token in tokens:
                    token.remove()
                return
            node = node.parent

    def run_script(self, script: str, *args: Any) -> Any:
        self.calls.append(("script", script) + args)
        return None

    def clear_native_inputs(self, container_id: str, token_selector: str) -> int:
        self.calls.append(("clear_native_inputs", container_id))
        container = self.by_id(container_id)
        if container is None:
            raise RuntimeError(f"javascript error: no element with id '{container_id}'")
        if container.tag in VALUE_TAGS:
            container.value = ""
        else:
            for tag in VALUE_TAGS:
                inner = [n for n in container.descendants() if n.tag == tag]
                if inner:
                    inner[0].value = ""
        return len([n for n in container.descendants() if _matches_css(n, token_selector)])

    @property
    def platform(self) -> str:
        return self._platform
