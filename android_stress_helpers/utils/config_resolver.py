# utils/config_resolver.py
import logging
from dataclasses import dataclass
from enum import Enum

from selenium.common.exceptions import WebDriverException

from android_stress_helpers import config

logger = logging.getLogger(__name__)


class Provenance(Enum):
    LIVE = 'live'
    DEFAULT = 'default'


@dataclass(frozen=True)
class ResolvedValue:
    value: str
    provenance: Provenance


class ConfigurationResolver:
    """
    Resolves device properties once, falling back to defaults.

    ``getprop`` is always issued, but its output is only used when
    ``honor_device_properties`` is set. Left off, every property resolves to
    its default, which is how the Chrome helper has always behaved on
    devices.
    """

    def __init__(self, device, honor_device_properties=None):
        self.device = device
        if honor_device_properties is None:
            honor_device_properties = config.HONOR_DEVICE_PROPERTIES
        self.honor_device_properties = honor_device_properties
        self._cache = {}

    def resolve(self, property_name, default) -> ResolvedValue:
        if property_name not in self._cache:
            self._cache[property_name] = self._lookup(property_name, default)
        return self._cache[property_name]

    def _lookup(self, property_name, default):
        prop = None
        try:
            output = self.device.execute_shell_command(f"getprop {property_name}")
            if self.honor_device_properties:
                prop = (output or '').strip()
        except WebDriverException as e:
            logger.warning("Failed to read property %s: %s", property_name, e)
        if not prop:
            return ResolvedValue(default, Provenance.DEFAULT)
        return ResolvedValue(prop, Provenance.LIVE)
