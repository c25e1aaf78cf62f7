# helpers/camera_helper.py
import logging
import time
from dataclasses import replace

from android_stress_helpers import config
from android_stress_helpers.helpers.base import AppHelper
from android_stress_helpers.utils.element_query import ElementQuery
from android_stress_helpers.utils.errors import UiElementNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE = 'com.google.android.GoogleCamera'
DEFAULT_LAUNCHER_NAME = 'Camera'

UI_SHUTTER_BUTTON_ID = 'shutter_button'
UI_CAMERA_SWITCH_ID = 'camera_switch_button'

DESC_CAPTURE_PHOTO = "Capture photo"
DESC_CAPTURE_VIDEO = "Capture video"
DESC_STOP_VIDEO = "Stop video"
DESC_SWITCH_TO_FRONT = "Switch to front camera"
DESC_SWITCH_TO_BACK = "Switch to back camera"

TO_CAMERA_MODE = ElementQuery(description="Switch to Camera Mode")
TO_VIDEO_MODE = ElementQuery(description="Switch to Video Camera")

# First-run tips, dismissed best-effort in this order
FIRST_RUN_BUTTONS = (ElementQuery(text="NEXT"), ElementQuery(text="Got it"))


class CameraHelper(AppHelper):
    """Drives Google Camera: facing, photo/video mode and capture."""

    def __init__(self, device, locator=None, resolver=None, first_run_clicks=None):
        super().__init__(device, locator, resolver)
        self.first_run_clicks = config.FIRST_RUN_CLICKS if first_run_clicks is None else first_run_clicks
        self.transition_wait = config.MAX_DIALOG_TRANSITION
        self.capture_timeout = config.CAPTURE_TIMEOUT

    def get_package(self):
        return self.resolver.resolve('dev.camera.package', DEFAULT_PACKAGE).value

    def get_launcher_name(self):
        return self.resolver.resolve('dev.camera.name', DEFAULT_LAUNCHER_NAME).value

    def _shutter(self, description):
        return replace(ElementQuery.res(self.get_package(), UI_SHUTTER_BUTTON_ID), description=description)

    def _camera_switch(self, description):
        return replace(ElementQuery.res(self.get_package(), UI_CAMERA_SWITCH_ID), description=description)

    def dismiss_initial_dialogs(self):
        dismissed = 0
        for query in FIRST_RUN_BUTTONS:
            for _ in range(self.first_run_clicks):
                button = self.locator.wait_for(query, self.transition_wait)
                if button is None:
                    break
                button.click()
                dismissed += 1
        logger.info("Dismissed %d first-run dialogs", dismissed)
        return dismissed

    def go_to_back_camera(self):
        self._go_to_facing(DESC_SWITCH_TO_FRONT, DESC_SWITCH_TO_BACK, "back")

    def go_to_front_camera(self):
        self._go_to_facing(DESC_SWITCH_TO_BACK, DESC_SWITCH_TO_FRONT, "front")

    def go_to_camera_mode(self):
        self._go_to_mode(self._shutter(DESC_CAPTURE_PHOTO), TO_CAMERA_MODE, "camera")

    def go_to_video_mode(self):
        self._go_to_mode(self._shutter(DESC_CAPTURE_VIDEO), TO_VIDEO_MODE, "video")

    def capture_photo(self):
        shutter = self._shutter(DESC_CAPTURE_PHOTO)
        self._require(shutter, "Unable to find the photo shutter.").click()
        # The shutter is busy while the photo is taken and comes back once it is processed
        if not self.locator.wait_for_gone(shutter, self.transition_wait):
            raise UiElementNotFoundError("Photo capture did not start.", shutter)
        self._require(shutter, "Photo capture did not complete.", self.capture_timeout)
        logger.info("Captured photo")

    def capture_video(self, duration_ms):
        self._require(self._shutter(DESC_CAPTURE_VIDEO), "Unable to find the video shutter.").click()
        self._require(self._shutter(DESC_STOP_VIDEO), "Video recording did not start.",
                      self.transition_wait)
        time.sleep(duration_ms / 1000.0)
        self._require(self._shutter(DESC_STOP_VIDEO), "Unable to stop video recording.").click()
        self._require(self._shutter(DESC_CAPTURE_VIDEO), "Video capture did not complete.",
                      self.capture_timeout)
        logger.info("Captured %d ms of video", duration_ms)

    def _go_to_facing(self, current_desc, toggle_desc, name):
        """The switch button describes the facing it would change *to*."""
        if self.locator.has(self._camera_switch(current_desc)):
            logger.debug("Already on the %s camera", name)
            return
        self._require(self._camera_switch(toggle_desc),
                      f"Unable to switch to the {name} camera.").click()
        if self.locator.wait_for(self._camera_switch(current_desc), self.transition_wait) is None:
            raise UiElementNotFoundError(f"Did not reach the {name} camera.",
                                         self._camera_switch(current_desc))

    def _go_to_mode(self, shutter, toggle, name):
        if self.locator.has(shutter):
            logger.debug("Already in %s mode", name)
            return
        self._require(toggle, f"Unable to switch to {name} mode.", self.transition_wait).click()
        self._require(shutter, f"Did not reach {name} mode.", self.transition_wait)
