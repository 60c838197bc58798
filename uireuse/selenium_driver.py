# uireuse/selenium_driver.py
"""
@file selenium_driver.py
@brief IUIDriver binding for Selenium WebDriver.

Driver exceptions (stale references, intercepted clicks, invalid element
state) are passed through untranslated; the interaction layer decides which
of them it handles.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from .interfaces import MODIFIER_KEYS, IElementHandle, IUIDriver, Key, KeyInput

BY_STRATEGY: Dict[str, str] = {
    "css": By.CSS_SELECTOR,
    "xpath": By.XPATH,
    "id": By.ID,
}

SELENIUM_KEYS: Dict[Key, str] = {
    Key.ENTER: Keys.ENTER,
    Key.TAB: Keys.TAB,
    Key.BACKSPACE: Keys.BACKSPACE,
    Key.ESCAPE: Keys.ESCAPE,
    Key.F4: Keys.F4,
    Key.ARROW_LEFT: Keys.ARROW_LEFT,
    Key.ARROW_RIGHT: Keys.ARROW_RIGHT,
    Key.CONTROL: Keys.CONTROL,
    Key.COMMAND: Keys.COMMAND,
    Key.SHIFT: Keys.SHIFT,
}

# Centre point of the element is hit by the element or one of its children.
# Off-screen elements count as unobstructed: WebDriver scrolls them into view on click.
_HIT_TEST_SCRIPT = """
const el = arguments[0];
const r = el.getBoundingClientRect();
const x = r.left + r.width / 2;
const y = r.top + r.height / 2;
if (x < 0 || y < 0 || x >= window.innerWidth || y >= window.innerHeight) {
    return true;
}
const hit = document.elementFromPoint(x, y);
return !!hit && (hit === el || el.contains(hit));
"""

_IN_VIEWPORT_SCRIPT = """
const r = arguments[0].getBoundingClientRect();
return r.width > 0 && r.height > 0 && r.bottom > 0 && r.right > 0
    && r.top < window.innerHeight && r.left < window.innerWidth;
"""

_SCROLL_SCRIPT = "arguments[0].scrollIntoView({block: 'center', inline: 'nearest'});"

_CLEAR_NATIVE_INPUTS_SCRIPT = """
const container = document.getElementById(arguments[0]);
if (!container) {
    throw new Error("No element with id '" + arguments[0] + "'");
}
const tag = container.tagName.toLowerCase();
if (tag === "input" || tag === "textarea") {
    container.value = "";
} else {
    const input = container.getElementsByTagName("input")[0];
    const textarea = container.getElementsByTagName("textarea")[0];
    if (input) { input.value = ""; }
    if (textarea) { textarea.value = ""; }
}
return container.querySelectorAll(arguments[1]).length;
"""


def to_selenium_key(key: KeyInput) -> str:
    if isinstance(key, Key):
        return SELENIUM_KEYS[key]
    return key


class SeleniumHandle(IElementHandle):
    """IElementHandle over a Selenium WebElement."""

    def __init__(self, element: WebElement):
        self._element = element

    @property
    def element(self) -> WebElement:
        return self._element

    @property
    def _driver(self) -> WebDriver:
        return self._element.parent

    def exists(self) -> bool:
        try:
            self._element.is_enabled()
            return True
        except StaleElementReferenceException:
            return False

    def is_visible(self) -> bool:
        return self._element.is_displayed()

    def is_visible_in_viewport(self) -> bool:
        return bool(self._driver.execute_script(_IN_VIEWPORT_SCRIPT, self._element))

    def is_clickable(self) -> bool:
        if not (self._element.is_displayed() and self._element.is_enabled()):
            return False
        return bool(self._driver.execute_script(_HIT_TEST_SCRIPT, self._element))

    def is_selected(self) -> bool:
        return self._element.is_selected()

    def click(self) -> None:
        self._element.click()

    def set_value(self, value: str) -> None:
        self._element.clear()
        if value:
            self._element.send_keys(value)

    def clear_value(self) -> None:
        self._element.clear()

    def get_value(self) -> str:
        value = self._element.get_property("value")
        return "" if value is None else str(value)

    def get_text(self) -> str:
        return self._element.text

    def get_attribute(self, name: str) -> Optional[str]:
        return self._element.get_attribute(name)

    @property
    def tag_name(self) -> str:
        return self._element.tag_name.lower()

    def scroll_into_view(self) -> None:
        self._driver.execute_script(_SCROLL_SCRIPT, self._element)

    def __eq__(self, other: object) -> bool:
        # Selenium hands out a new WebElement per lookup; its id names the node.
        if not isinstance(other, SeleniumHandle):
            return NotImplemented
        return self._element.id == other.element.id

    def __hash__(self) -> int:
        return hash(self._element.id)

    def __repr__(self) -> str:
        return f"SeleniumHandle({self._element.id})"


class SeleniumDriver(IUIDriver):
    """
    IUIDriver over a Selenium 4 WebDriver session.

        driver = SeleniumDriver(webdriver.Chrome())
        ui = UserInteraction(driver)
    """

    def __init__(self, webdriver: WebDriver):
        """
        @param webdriver Live WebDriver session; the caller owns its lifecycle
        """
        self.webdriver = webdriver

    def find_elements(
        self,
        strategy: str,
        value: str,
        root: Optional[IElementHandle] = None,
    ) -> List[IElementHandle]:
        by = BY_STRATEGY.get(strategy)
        if by is None:
            raise ValueError(f"Unknown locator strategy: {strategy}. Use one of {sorted(BY_STRATEGY)}")
        scope = root.element if isinstance(root, SeleniumHandle) else self.webdriver
        return [SeleniumHandle(e) for e in scope.find_elements(by, value)]

    def active_element(self) -> IElementHandle:
        return SeleniumHandle(self.webdriver.switch_to.active_element)

    def press_keys(self, keys: Sequence[KeyInput]) -> None:
        modifiers = [k for k in keys if k in MODIFIER_KEYS]
        others = [k for k in keys if k not in MODIFIER_KEYS]

        chain = ActionChains(self.webdriver)
        for key in modifiers:
            chain.key_down(to_selenium_key(key))
        for key in others:
            chain.send_keys(to_selenium_key(key))
        for key in reversed(modifiers):
            chain.key_up(to_selenium_key(key))
        chain.perform()

    def run_script(self, script: str, *args: Any) -> Any:
        unwrapped = [a.element if isinstance(a, SeleniumHandle) else a for a in args]
        return self.webdriver.execute_script(script, *unwrapped)

    def clear_native_inputs(self, container_id: str, token_selector: str) -> int:
        return int(self.run_script(_CLEAR_NATIVE_INPUTS_SCRIPT, container_id, token_selector) or 0)

    @property
    def platform(self) -> str:
        caps = getattr(self.webdriver, "capabilities", None) or {}
        return str(caps.get("platformName") or caps.get("platform") or "").lower()
