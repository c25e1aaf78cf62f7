# utils/page_load.py
import logging

from android_stress_helpers import config
from android_stress_helpers.utils.element_query import ElementQuery

logger = logging.getLogger(__name__)

STOP_LOADING = ElementQuery(description="Stop page loading")


def await_load_complete(locator, package, timeout=None):
    """
    Waits for a page's loading indicator to go away.

    Returns True once no indicator is showing and False if one persisted for
    the whole timeout. If no indicator has rendered yet the page counts as
    loaded, so a slow-to-appear spinner gives a false positive.

    The check starts with the device's idle wait. On Appium that is a fixed
    IDLE_WAIT sleep, so "no indicator" returns after that settle time rather
    than instantly.
    """
    timeout = config.PAGE_LOAD_TIMEOUT if timeout is None else timeout
    locator.device.wait_for_idle()
    for indicator in (STOP_LOADING, ElementQuery.res(package, 'progress')):
        if locator.has(indicator):
            loaded = locator.wait_for_gone(indicator, timeout)
            if not loaded:
                logger.warning("Page still loading after %.0fs (%s)", timeout, indicator.describe())
            return loaded
    return True
