"""Unit tests for device details collection."""

from unittest.mock import patch

import pytest

from feedback_jira.__version__ import __version__
from feedback_jira.device import get_app_version, get_device_details


class TestGetDeviceDetails:
    """Test platform-specific details."""

    def test_macos(self):
        """macOS reports Apple as brand and the macOS version."""
        with (
            patch("feedback_jira.device.platform.system", return_value="Darwin"),
            patch("feedback_jira.device.platform.machine", return_value="arm64"),
            patch("feedback_jira.device.platform.mac_ver", return_value=("14.4", ("", "", ""), "")),
        ):
            details = get_device_details(app_version="2.1.0-7")

        assert details == {
            "platform": "darwin",
            "brand": "Apple",
            "model": "arm64",
            "osVersion": "14.4",
            "make": "darwin, Apple, arm64, 14.4",
            "appVersion": "2.1.0-7",
        }

    def test_linux_uses_os_release_name(self):
        """Linux brand comes from os-release."""
        with (
            patch("feedback_jira.device.platform.system", return_value="Linux"),
            patch("feedback_jira.device.platform.machine", return_value="x86_64"),
            patch("feedback_jira.device.platform.release", return_value="6.8.0"),
            patch(
                "feedback_jira.device.platform.freedesktop_os_release",
                return_value={"NAME": "Ubuntu"},
            ),
        ):
            details = get_device_details(app_version="1.0.0")

        assert details["brand"] == "Ubuntu"
        assert details["osVersion"] == "6.8.0"
        assert details["make"] == "linux, Ubuntu, x86_64, 6.8.0"

    def test_linux_without_os_release(self):
        """Missing os-release falls back to 'Linux'."""
        with (
            patch("feedback_jira.device.platform.system", return_value="Linux"),
            patch(
                "feedback_jira.device.platform.freedesktop_os_release",
                side_effect=OSError("no os-release"),
            ),
        ):
            assert get_device_details(app_version="1.0.0")["brand"] == "Linux"

    def test_windows(self):
        """Windows reports Microsoft as brand."""
        with (
            patch("feedback_jira.device.platform.system", return_value="Windows"),
            patch("feedback_jira.device.platform.version", return_value="10.0.22631"),
        ):
            details = get_device_details(app_version="1.0.0")
        assert details["brand"] == "Microsoft"
        assert details["osVersion"] == "10.0.22631"

    @pytest.mark.parametrize("system", ["Java", "Emscripten", ""])
    def test_unsupported_platform_empty(self, system):
        """Unsupported platforms yield an empty mapping."""
        with patch("feedback_jira.device.platform.system", return_value=system):
            assert get_device_details() == {}

    def test_default_app_version(self):
        """appVersion defaults to the installed package version."""
        with patch("feedback_jira.device.platform.system", return_value="Windows"):
            details = get_device_details()
        assert details["appVersion"] == get_app_version()


def test_app_version_fallback():
    """Uninstalled distributions fall back to the package version."""
    assert get_app_version("definitely-not-installed-dist") == __version__
