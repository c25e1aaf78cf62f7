# helpers/chrome_helper.py
import logging
import time

from android_stress_helpers import config
from android_stress_helpers.helpers.base import AppHelper
from android_stress_helpers.utils.dialog_sequencer import DialogDismissalSequencer, OnboardingQueries
from android_stress_helpers.utils.element_query import Direction, ElementQuery, RetryBudget
from android_stress_helpers.utils.errors import UiElementNotFoundError
from android_stress_helpers.utils.page_load import await_load_complete

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE = 'com.android.chrome'
DEFAULT_LAUNCHER_NAME = 'Chrome'

UI_SEARCH_BOX_ID = 'search_box_text'
UI_URL_BAR_ID = 'url_bar'
UI_VIEW_HOLDER_ID = 'compositor_view_holder'

MENU_BUTTON = ElementQuery(description="More options")
SETTINGS_ENTRY = ElementQuery(description="Settings")
MERGE_TABS_ENTRY = ElementQuery(text="Merge tabs and apps")
CONFIRM_OK = ElementQuery(text="OK")
WEB_VIEW = ElementQuery(class_name='android.webkit.WebView')


class ChromeHelper(AppHelper):
    """Drives Chrome: first-run dialogs, navigation, menu and tab settings."""

    def __init__(self, device, locator=None, resolver=None, fling_budget=None):
        super().__init__(device, locator, resolver)
        self.fling_budget = fling_budget or RetryBudget(config.FLING_RETRIES)
        self.page_load_timeout = config.PAGE_LOAD_TIMEOUT
        self.settle_time = config.SETTINGS_SETTLE

    def get_package(self):
        return self.resolver.resolve('dev.chrome.package', DEFAULT_PACKAGE).value

    def get_launcher_name(self):
        return self.resolver.resolve('dev.chrome.name', DEFAULT_LAUNCHER_NAME).value

    def _res(self, name):
        return ElementQuery.res(self.get_package(), name)

    def onboarding_queries(self):
        return OnboardingQueries(
            terms_accept=self._res('terms_accept'),
            no_accounts_marker=ElementQuery(text_prefix="Add an account"),
            negative_button=self._res('negative_button'),
            positive_button=self._res('positive_button'),
            setup_wizard=self._res('fre_pager'),
        )

    def dismiss_initial_dialogs(self):
        return DialogDismissalSequencer(self.locator, self.onboarding_queries()).run()

    def open_url(self, url):
        """Types the url into the address bar, submits it and waits for the page."""
        self._focus_url_bar()
        self.device.wait_for_idle()
        # The click may have re-laid out the toolbar, look the bar up again
        url_bar = self._require(self._res(UI_URL_BAR_ID), "Failed to detect a URL bar")
        url_bar.set_text(url)
        self.device.press_enter()
        logger.info("Opened %s", url)
        self.wait_for_page_load()

    def fling_page(self, direction):
        page = self._get_web_page()
        page.gesture_margin = self.locator.gesture_margin
        page.fling(direction)
        # Block until the fling is complete
        self.device.wait_for_idle()

    def open_menu(self):
        menu_button = self.locator.locate_with_recovery(
            MENU_BUTTON, Direction.UP, self.fling_budget, region=self._find_web_page)
        if menu_button is None:
            raise UiElementNotFoundError("Unable to find menu button.", MENU_BUTTON)
        menu_button.click_and_wait(config.NEW_WINDOW_TIMEOUT)

    def merge_tabs(self):
        self._set_merge_tabs(True)

    def unmerge_tabs(self):
        self._set_merge_tabs(False)

    def wait_for_page_load(self):
        return await_load_complete(self.locator, self.get_package(), self.page_load_timeout)

    def _set_merge_tabs(self, enabled):
        self._open_settings()
        self._require(MERGE_TABS_ENTRY, "Unable to find merge tabs setting.",
                      config.MAX_DIALOG_TRANSITION).click()
        wanted = "On" if enabled else "Off"
        if self.locator.has(ElementQuery(text=wanted)):
            logger.info("Merge tabs and apps already %s", wanted)
            self.device.press_back()
            self.device.press_back()
        else:
            self._require(self._res('switch_widget'), "Unable to find merge tabs switch.").click()
            self._require(CONFIRM_OK, "Unable to confirm merge tabs change.",
                          config.MAX_DIALOG_TRANSITION).click()
            logger.info("Merge tabs and apps switched %s", wanted)
        time.sleep(self.settle_time)
        self.wait_for_page_load()

    def _open_settings(self):
        self.open_menu()
        menu = self._require(
            ElementQuery(class_name='android.widget.ListView', package_name=self.get_package()),
            "Unable to find the overflow menu.")
        menu.gesture_margin = self.locator.gesture_margin
        menu.scroll(Direction.DOWN, 1.0)
        self._require(SETTINGS_ENTRY, "Unable to find Settings in the menu.").click_and_wait(3)

    def _find_web_page(self):
        return self.locator.find(WEB_VIEW) or self.locator.find(self._res(UI_VIEW_HOLDER_ID))

    def _get_web_page(self):
        self.device.wait_for_idle()
        page = self._find_web_page()
        if page is None:
            raise UiElementNotFoundError("Unable to select web page.")
        return page

    def _focus_url_bar(self):
        # First time, the address bar is a search box that expands into the url bar
        search_box = self.locator.find(self._res(UI_SEARCH_BOX_ID))
        if search_box is not None:
            search_box.click()
        url_bar_query = self._res(UI_URL_BAR_ID)
        url_bar = self.locator.locate_with_recovery(
            url_bar_query, Direction.UP, self.fling_budget, region=self._find_web_page)
        if url_bar is None:
            raise UiElementNotFoundError("Failed to detect a URL bar", url_bar_query)
        url_bar.click()
