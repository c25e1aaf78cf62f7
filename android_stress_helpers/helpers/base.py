# helpers/base.py
import logging

from android_stress_helpers.utils.config_resolver import ConfigurationResolver
from android_stress_helpers.utils.element_locator import ElementLocator
from android_stress_helpers.utils.errors import UiElementNotFoundError

logger = logging.getLogger(__name__)


class AppHelper:
    """Common open/exit behaviour for helpers that drive a single app."""

    def __init__(self, device, locator=None, resolver=None):
        self.device = device
        self.locator = locator or ElementLocator(device)
        self.resolver = resolver or ConfigurationResolver(device)

    def get_package(self):
        raise NotImplementedError

    def get_launcher_name(self):
        raise NotImplementedError

    def dismiss_initial_dialogs(self):
        raise NotImplementedError

    def open(self):
        """Brings the app to the foreground and lets it settle."""
        logger.info("Opening %s", self.get_launcher_name())
        self.device.launch_app(self.get_package())
        self.device.wait_for_idle()

    def exit(self):
        """Leaves the app for the launcher."""
        logger.info("Exiting %s", self.get_launcher_name())
        self.device.press_back()
        self.device.press_home()
        self.device.wait_for_idle()

    def _require(self, query, message, timeout=0):
        element = self.locator.wait_for(query, timeout)
        if element is None:
            raise UiElementNotFoundError(message, query)
        return element
