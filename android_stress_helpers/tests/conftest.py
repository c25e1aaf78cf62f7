# tests/conftest.py
import time

import pytest
from selenium.common.exceptions import WebDriverException

from android_stress_helpers import config as app_config
from android_stress_helpers.utils.element_locator import ElementLocator
from android_stress_helpers.utils.element_query import ElementHandle, UiDevice


def pytest_addoption(parser):
    parser.addoption("--run-device", action="store_true", default=False,
                     help="run stress tests against a live Appium session")
    parser.addoption("--video-duration", action="store", default=None,
                     help="video capture length in ms for the camera stress tests")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-device"):
        return
    skip_device = pytest.mark.skip(reason="needs --run-device and an Appium server")
    for item in items:
        if item.get_closest_marker("device"):
            item.add_marker(skip_device)


class FakeElement(ElementHandle):
    """A UI node in the fake screen. Records every interaction."""

    def __init__(self, device, attributes, on_click=None, appear_after=0.0, vanish_after=None):
        self.device = device
        self.attributes = attributes
        self.on_click = on_click
        created = time.monotonic()
        self.appears_at = created + appear_after
        self.vanishes_at = None if vanish_after is None else created + vanish_after
        self.removed = False
        self.clicks = 0
        self.texts = []
        self.flings = []
        self.scrolls = []
        self.gesture_margin = 0

    def is_present(self):
        now = time.monotonic()
        if self.removed or now < self.appears_at:
            return False
        return self.vanishes_at is None or now < self.vanishes_at

    def click(self):
        self.clicks += 1
        self.device.events.append(('click', self.attributes))
        if self.on_click:
            self.on_click(self)

    def click_and_wait(self, timeout):
        self.click()
        return True

    def set_text(self, text):
        self.texts.append(text)
        self.device.events.append(('set_text', text))

    def scroll(self, direction, percent=1.0):
        self.scrolls.append((direction, percent, self.gesture_margin))

    def fling(self, direction):
        self.flings.append((direction, self.gesture_margin))
        self.device.gestures.append(direction)
        self.device.events.append(('fling', direction))


class FakeDevice(UiDevice):
    """In-memory UI state provider standing in for the Appium session."""

    def __init__(self, properties=None, shell_error=None):
        self.elements = []
        self.events = []
        self.gestures = []
        self.queries = []
        self.shell_commands = []
        self.properties = properties or {}
        self.shell_error = shell_error
        self.idle_waits = 0
        self.launched = []
        self.signature = 0

    def add(self, attributes=None, on_click=None, appear_after=0.0, vanish_after=None, **kwargs):
        attributes = dict(attributes or {})
        for key, value in kwargs.items():
            attributes[key.replace('_', '-')] = value
        element = FakeElement(self, attributes, on_click, appear_after, vanish_after)
        self.elements.append(element)
        return element

    def remove(self, element):
        element.removed = True
        self.signature += 1

    def find_object(self, query):
        self.queries.append(query)
        for element in self.elements:
            if element.is_present() and query.matches(element.attributes):
                return element
        return None

    def wait_for_idle(self):
        self.idle_waits += 1

    def press_back(self):
        self.events.append(('key', 'back'))

    def press_home(self):
        self.events.append(('key', 'home'))

    def press_enter(self):
        self.events.append(('key', 'enter'))

    def execute_shell_command(self, command):
        self.shell_commands.append(command)
        if self.shell_error:
            raise WebDriverException(self.shell_error)
        name = command.split()[-1]
        return self.properties.get(name, '') + '\n'

    def launch_app(self, package):
        self.launched.append(package)

    def page_signature(self):
        return self.signature

    def clicked(self):
        return [attrs for kind, attrs in self.events if kind == 'click']


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def locator(device):
    return ElementLocator(device, poll_interval=0.01, gesture_margin=500)


@pytest.fixture
def fast_timeouts(monkeypatch):
    """Shrinks the configured waits so the fake screen answers quickly."""
    monkeypatch.setattr(app_config, 'APP_INIT_WAIT', 0.05)
    monkeypatch.setattr(app_config, 'MAX_DIALOG_TRANSITION', 0.05)
    monkeypatch.setattr(app_config, 'PAGE_LOAD_TIMEOUT', 0.1)
    monkeypatch.setattr(app_config, 'NEW_WINDOW_TIMEOUT', 0.05)
    monkeypatch.setattr(app_config, 'SETTINGS_SETTLE', 0)
    monkeypatch.setattr(app_config, 'CAPTURE_TIMEOUT', 0.1)
    monkeypatch.setattr(app_config, 'HONOR_DEVICE_PROPERTIES', False)


@pytest.fixture
def make_device():
    return FakeDevice
