# utils/element_query.py
"""
Driver-independent description of UI elements and the interfaces a UI
inspection driver has to provide.

An ``ElementQuery`` is what callers ask for; an ``ElementHandle`` is what a
driver hands back. Handles are snapshots: once the screen changes they may be
stale and must be re-queried.
"""
from dataclasses import dataclass, fields
from enum import Enum
from typing import Mapping, Optional


class Direction(str, Enum):
    """Gesture directions, named the way UiAutomator2 names them."""
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'


@dataclass(frozen=True)
class ElementQuery:
    """Immutable predicate over element attributes. Set constraints are ANDed."""
    resource_id: Optional[str] = None
    text: Optional[str] = None
    text_prefix: Optional[str] = None
    description: Optional[str] = None
    class_name: Optional[str] = None
    package_name: Optional[str] = None
    scrollable: Optional[bool] = None

    def __post_init__(self):
        if all(getattr(self, f.name) is None for f in fields(self)):
            raise ValueError("ElementQuery needs at least one constraint")

    @classmethod
    def res(cls, package, name):
        """Query by resource id ``<package>:id/<name>``."""
        return cls(resource_id=f"{package}:id/{name}")

    def matches(self, attributes: Mapping[str, object]) -> bool:
        """Evaluates the query against UI hierarchy attributes (page source names)."""
        if self.resource_id is not None and attributes.get('resource-id') != self.resource_id:
            return False
        if self.text is not None and attributes.get('text') != self.text:
            return False
        if self.text_prefix is not None:
            text = attributes.get('text') or ''
            if not str(text).startswith(self.text_prefix):
                return False
        if self.description is not None and attributes.get('content-desc') != self.description:
            return False
        if self.class_name is not None and attributes.get('class') != self.class_name:
            return False
        if self.package_name is not None and attributes.get('package') != self.package_name:
            return False
        if self.scrollable is not None:
            scrollable = str(attributes.get('scrollable', 'false')).lower() == 'true'
            if scrollable != self.scrollable:
                return False
        return True

    def to_ui_selector(self) -> str:
        """Renders the query as a UiAutomator ``UiSelector`` expression."""
        selector = 'new UiSelector()'
        if self.resource_id is not None:
            selector += f'.resourceId({_quote(self.resource_id)})'
        if self.text is not None:
            selector += f'.text({_quote(self.text)})'
        if self.text_prefix is not None:
            selector += f'.textStartsWith({_quote(self.text_prefix)})'
        if self.description is not None:
            selector += f'.description({_quote(self.description)})'
        if self.class_name is not None:
            selector += f'.className({_quote(self.class_name)})'
        if self.package_name is not None:
            selector += f'.packageName({_quote(self.package_name)})'
        if self.scrollable is not None:
            selector += f'.scrollable({str(self.scrollable).lower()})'
        return selector

    def describe(self) -> str:
        parts = [f"{f.name}={getattr(self, f.name)!r}"
                 for f in fields(self) if getattr(self, f.name) is not None]
        return ", ".join(parts)


def _quote(value):
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class RetryBudget:
    """Number of corrective gestures a recovery may spend before giving up."""
    attempts: int

    def __post_init__(self):
        if self.attempts < 0:
            raise ValueError(f"RetryBudget attempts must be >= 0, got {self.attempts}")


class ElementHandle:
    """A located element. Valid only until the next screen transition."""

    gesture_margin = 0

    def click(self):
        raise NotImplementedError

    def click_and_wait(self, timeout) -> bool:
        """Clicks and waits for a new window; returns False if none appeared."""
        raise NotImplementedError

    def set_text(self, text):
        raise NotImplementedError

    def scroll(self, direction: Direction, percent=1.0):
        raise NotImplementedError

    def fling(self, direction: Direction):
        raise NotImplementedError


class UiDevice:
    """The driver-level capabilities the locator and the helpers depend on."""

    def find_object(self, query: ElementQuery) -> Optional[ElementHandle]:
        raise NotImplementedError

    def wait_for_idle(self):
        raise NotImplementedError

    def press_back(self):
        raise NotImplementedError

    def press_home(self):
        raise NotImplementedError

    def press_enter(self):
        raise NotImplementedError

    def execute_shell_command(self, command) -> str:
        raise NotImplementedError

    def launch_app(self, package):
        raise NotImplementedError

    def page_signature(self):
        """Something that changes when the window content changes."""
        raise NotImplementedError
