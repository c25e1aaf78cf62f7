"""UI-automation helpers for stress testing Android apps over Appium."""
from android_stress_helpers.helpers.camera_helper import CameraHelper
from android_stress_helpers.helpers.chrome_helper import ChromeHelper
from android_stress_helpers.utils.appium_handler import AppiumHandler
from android_stress_helpers.utils.element_locator import ElementLocator
from android_stress_helpers.utils.element_query import Direction, ElementQuery, RetryBudget
from android_stress_helpers.utils.errors import AppiumSessionError, UiElementNotFoundError

__version__ = '0.1.0'
