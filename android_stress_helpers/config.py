# config.py
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# --- Appium session ---
APPIUM_SERVER_URL = os.getenv('APPIUM_SERVER_URL', 'http://localhost:4723')
DEVICE_NAME = os.getenv('DEVICE_NAME', 'test_emulator')
PLATFORM_VERSION = os.getenv('PLATFORM_VERSION')
IMPLICIT_WAIT = float(os.getenv('IMPLICIT_WAIT', 0))

# --- Timings (seconds) ---
POLL_INTERVAL = float(os.getenv('POLL_INTERVAL', 0.5))
IDLE_WAIT = float(os.getenv('IDLE_WAIT', 1))
APP_INIT_WAIT = float(os.getenv('APP_INIT_WAIT', 10))
MAX_DIALOG_TRANSITION = float(os.getenv('MAX_DIALOG_TRANSITION', 5))
PAGE_LOAD_TIMEOUT = float(os.getenv('PAGE_LOAD_TIMEOUT', 30))
NEW_WINDOW_TIMEOUT = float(os.getenv('NEW_WINDOW_TIMEOUT', 5))
SETTINGS_SETTLE = float(os.getenv('SETTINGS_SETTLE', 5))
CAPTURE_TIMEOUT = float(os.getenv('CAPTURE_TIMEOUT', 10))
FIRST_RUN_CLICKS = int(os.getenv('FIRST_RUN_CLICKS', 3))

# --- Gestures ---
GESTURE_MARGIN = int(os.getenv('GESTURE_MARGIN', 500))
FLING_RETRIES = int(os.getenv('FLING_RETRIES', 2))

# getprop output is ignored unless this is set, see ConfigurationResolver
HONOR_DEVICE_PROPERTIES = os.getenv('HONOR_DEVICE_PROPERTIES', '0') == '1'

# --- Stress test parameters ---
VIDEO_DURATION_MS = int(os.getenv('VIDEO_DURATION_MS', 5000))


def build_capabilities(app_package, app_activity=None, device_name=None):
    """Returns UiAutomator2 capabilities for driving the given package."""
    capabilities = {
        'platformName': 'Android',
        'automationName': 'UiAutomator2',
        'deviceName': device_name or DEVICE_NAME,
        'appPackage': app_package,
        'noReset': True,
        'fullReset': False,
        'language': 'en',
        'locale': 'US'
    }
    if app_activity:
        capabilities['appActivity'] = app_activity
    if PLATFORM_VERSION:
        capabilities['platformVersion'] = PLATFORM_VERSION
    return capabilities
