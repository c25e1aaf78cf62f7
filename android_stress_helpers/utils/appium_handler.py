# utils/appium_handler.py
import logging
import time

from appium import webdriver
from appium.options.android import UiAutomator2Options
from appium.webdriver.common.appiumby import AppiumBy
from appium.webdriver.extensions.android.nativekey import AndroidKey
from selenium.common.exceptions import InvalidSessionIdException, TimeoutException
from selenium.webdriver.support.ui import WebDriverWait

from android_stress_helpers import config
from android_stress_helpers.utils.element_query import ElementHandle, UiDevice
from android_stress_helpers.utils.errors import AppiumSessionError

logger = logging.getLogger(__name__)


class AppiumElement(ElementHandle):
    """ElementHandle backed by an Appium WebElement."""

    def __init__(self, handler, element):
        self.handler = handler
        self.element = element
        self.gesture_margin = 0

    def click(self):
        self.element.click()

    def click_and_wait(self, timeout):
        before = self.handler.page_signature()
        self.element.click()
        try:
            WebDriverWait(self.handler.driver, timeout, poll_frequency=self.handler.poll_interval).until(
                lambda _: self.handler.page_signature() != before)
            return True
        except TimeoutException:
            logger.debug("No new window within %.1fs after click", timeout)
            return False

    def set_text(self, text):
        self.element.clear()
        self.element.send_keys(text)

    def scroll(self, direction, percent=1.0):
        args = self._gesture_area()
        args.update({'direction': direction.value, 'percent': percent})
        self.handler.driver.execute_script('mobile: scrollGesture', args)

    def fling(self, direction):
        args = self._gesture_area()
        args['direction'] = direction.value
        self.handler.driver.execute_script('mobile: flingGesture', args)

    def _gesture_area(self):
        """Element bounds shrunk by the gesture margin on every edge."""
        margin = self.gesture_margin
        if not margin:
            return {'elementId': self.element.id}
        rect = self.element.rect
        width = rect['width'] - 2 * margin
        height = rect['height'] - 2 * margin
        if width <= 0 or height <= 0:
            logger.debug("Gesture margin %d too large for %s, using full bounds", margin, rect)
            return {'elementId': self.element.id}
        return {
            'left': rect['x'] + margin,
            'top': rect['y'] + margin,
            'width': width,
            'height': height
        }


class AppiumHandler(UiDevice):
    """Handles the Appium driver session and exposes it as a UiDevice."""
    def __init__(self, server_url=None, capabilities=None, idle_wait=None, poll_interval=None):
        if not capabilities:
            raise ValueError("Capabilities must be provided when initializing AppiumHandler")
        self.server_url = server_url or config.APPIUM_SERVER_URL
        self.capabilities = capabilities
        self.idle_wait = config.IDLE_WAIT if idle_wait is None else idle_wait
        self.poll_interval = config.POLL_INTERVAL if poll_interval is None else poll_interval
        self.driver = None

    def start_driver(self):
        """Starts the Appium driver session."""
        if self.driver is not None:
            return self.driver
        logger.info("Starting Appium driver at %s", self.server_url)
        options = UiAutomator2Options().load_capabilities(self.capabilities)
        options.set_capability('newCommandTimeout', 0)
        options.set_capability('autoGrantPermissions', True)
        try:
            self.driver = webdriver.Remote(self.server_url, options=options)
        except Exception as e:
            self.driver = None
            raise AppiumSessionError(f"Error starting Appium driver: {e}") from e
        # Finds are snapshots; waiting is done explicitly by the locator
        self.driver.implicitly_wait(config.IMPLICIT_WAIT)
        logger.info("Appium driver started, current package: %s", self.driver.current_package)
        return self.driver

    def stop_driver(self):
        """Stops the Appium driver session."""
        if self.driver:
            logger.info("Stopping Appium driver...")
            try:
                self.driver.quit()
            except Exception as e:
                logger.warning("Error stopping Appium driver: %s", e)
            finally:
                self.driver = None

    def _require_driver(self):
        if not self.driver:
            raise AppiumSessionError("Driver not started.")
        return self.driver

    def get_page_source(self):
        """Gets the XML page source of the current screen."""
        return self._require_driver().page_source

    # --- UiDevice ---

    def find_object(self, query):
        driver = self._require_driver()
        try:
            elements = driver.find_elements(AppiumBy.ANDROID_UIAUTOMATOR, query.to_ui_selector())
        except InvalidSessionIdException as e:
            logger.warning("Session invalid while finding %s, restarting driver: %s", query.describe(), e)
            self.stop_driver()
            self.start_driver()
            return None
        if not elements:
            return None
        return AppiumElement(self, elements[0])

    def wait_for_idle(self):
        # UiAutomator2 exposes no idle barrier, give the UI time to settle
        time.sleep(self.idle_wait)

    def press_back(self):
        self._require_driver().press_keycode(AndroidKey.BACK)

    def press_home(self):
        self._require_driver().press_keycode(AndroidKey.HOME)

    def press_enter(self):
        self._require_driver().press_keycode(AndroidKey.ENTER)

    def execute_shell_command(self, command):
        """Runs an adb shell command on the device (needs the adb_shell insecure feature)."""
        program, *args = command.split()
        output = self._require_driver().execute_script('mobile: shell', {'command': program, 'args': args})
        return output if isinstance(output, str) else ''

    def launch_app(self, package):
        logger.info("Launching %s", package)
        self._require_driver().activate_app(package)

    def page_signature(self):
        driver = self._require_driver()
        return driver.current_activity, driver.page_source
