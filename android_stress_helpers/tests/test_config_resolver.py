# tests/test_config_resolver.py
import logging

from android_stress_helpers.utils.config_resolver import ConfigurationResolver, Provenance


def test_device_value_is_ignored_by_default(make_device):
    device = make_device(properties={'dev.chrome.package': 'com.chrome.beta'})
    resolver = ConfigurationResolver(device, honor_device_properties=False)

    resolved = resolver.resolve('dev.chrome.package', 'com.android.chrome')

    assert resolved.value == 'com.android.chrome'
    assert resolved.provenance is Provenance.DEFAULT
    assert device.shell_commands == ['getprop dev.chrome.package']


def test_device_value_used_when_honored(make_device):
    device = make_device(properties={'dev.chrome.package': 'com.chrome.beta'})
    resolver = ConfigurationResolver(device, honor_device_properties=True)

    resolved = resolver.resolve('dev.chrome.package', 'com.android.chrome')

    assert resolved.value == 'com.chrome.beta'
    assert resolved.provenance is Provenance.LIVE


def test_empty_property_falls_back_even_when_honored(make_device):
    resolver = ConfigurationResolver(make_device(), honor_device_properties=True)
    assert resolver.resolve('dev.chrome.name', 'Chrome').provenance is Provenance.DEFAULT


def test_shell_failure_is_logged_and_defaulted(make_device, caplog):
    resolver = ConfigurationResolver(make_device(shell_error="adb_shell disabled"),
                                     honor_device_properties=True)
    with caplog.at_level(logging.WARNING):
        resolved = resolver.resolve('dev.chrome.name', 'Chrome')
    assert resolved.value == 'Chrome'
    assert resolved.provenance is Provenance.DEFAULT
    assert "dev.chrome.name" in caplog.text


def test_each_property_is_looked_up_once(make_device):
    device = make_device()
    resolver = ConfigurationResolver(device, honor_device_properties=False)
    resolver.resolve('dev.chrome.name', 'Chrome')
    resolver.resolve('dev.chrome.name', 'Chrome')
    assert device.shell_commands == ['getprop dev.chrome.name']
