# utils/element_locator.py
import logging
from typing import Callable, Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.support.ui import WebDriverWait

from android_stress_helpers import config
from android_stress_helpers.utils.element_query import (
    Direction,
    ElementHandle,
    ElementQuery,
    RetryBudget,
    UiDevice,
)

logger = logging.getLogger(__name__)

SCROLLABLE_REGION = ElementQuery(scrollable=True)

# Raised by the UI tree changing underneath a poll; treated as "not yet"
_TRANSIENT_ERRORS = (NoSuchElementException, StaleElementReferenceException)


class ElementLocator:
    """
    Finds elements on the current screen of a UiDevice.

    Absence is a normal result: ``find`` and ``wait_for`` return None and
    ``wait_for_gone`` returns False, callers decide whether that is fatal.
    """

    def __init__(self, device: UiDevice, poll_interval=None, gesture_margin=None):
        self.device = device
        self.poll_interval = config.POLL_INTERVAL if poll_interval is None else poll_interval
        self.gesture_margin = config.GESTURE_MARGIN if gesture_margin is None else gesture_margin

    def _wait(self, timeout):
        return WebDriverWait(self.device, timeout, poll_frequency=self.poll_interval,
                             ignored_exceptions=_TRANSIENT_ERRORS)

    def find(self, query: ElementQuery) -> Optional[ElementHandle]:
        """Single snapshot query of the current screen."""
        return self.device.find_object(query)

    def has(self, query: ElementQuery) -> bool:
        return self.find(query) is not None

    def wait_for(self, query: ElementQuery, timeout) -> Optional[ElementHandle]:
        """Polls until the query matches or the timeout elapses."""
        if timeout <= 0:
            return self.find(query)
        try:
            return self._wait(timeout).until(lambda device: device.find_object(query))
        except TimeoutException:
            logger.debug("No %s within %.1fs", query.describe(), timeout)
            return None

    def wait_for_gone(self, query: ElementQuery, timeout) -> bool:
        """True if the element is absent or vanishes within the timeout."""
        if timeout <= 0:
            return not self.has(query)
        try:
            self._wait(timeout).until_not(lambda device: device.find_object(query))
            return True
        except TimeoutException:
            logger.debug("%s still present after %.1fs", query.describe(), timeout)
            return False

    def locate_with_recovery(self, query: ElementQuery, direction: Direction, budget: RetryBudget,
                             region: Optional[Callable[[], Optional[ElementHandle]]] = None
                             ) -> Optional[ElementHandle]:
        """
        Finds an element, flinging the scrollable region between attempts.

        At most ``budget.attempts`` flings are performed. ``region`` returns
        the handle to fling; it is re-resolved before every gesture because
        the previous fling may have changed the screen.
        """
        if region is None:
            region = lambda: self.find(SCROLLABLE_REGION)
        remaining = budget.attempts
        while True:
            element = self.find(query)
            if element is not None:
                return element
            if remaining <= 0:
                break
            target = region()
            if target is None:
                logger.info("Nothing to fling while looking for %s", query.describe())
                break
            target.gesture_margin = self.gesture_margin
            logger.debug("Flinging %s to reveal %s (%d left)", direction.value, query.describe(), remaining)
            target.fling(direction)
            self.device.wait_for_idle()
            remaining -= 1
        logger.info("Gave up on %s after %d recovery gestures",
                    query.describe(), budget.attempts - remaining)
        return None
