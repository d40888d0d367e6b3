"""Device and application details for issue descriptions.

Collects a flat mapping describing the host the feedback was sent from.
Unsupported platforms yield an empty mapping, which leaves the
"Device details" section out of the description.
"""

import logging
import platform
from importlib import metadata

from .__version__ import __version__

logger = logging.getLogger("feedback_jira.device")

__all__ = ["get_app_version", "get_device_details"]

DISTRIBUTION_NAME = "feedback-jira"


def get_app_version(distribution: str = DISTRIBUTION_NAME) -> str:
    """Return the installed version of ``distribution``.

    Falls back to this package's own version when the distribution is not
    installed (e.g. running from a source checkout).
    """
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return __version__


def _linux_brand() -> str:
    try:
        return platform.freedesktop_os_release().get("NAME", "Linux")
    except OSError:
        return "Linux"


def get_device_details(app_version: str | None = None) -> dict[str, str]:
    """Collect platform and app details to include in the issue description.

    Args:
        app_version: Version string of the application sending feedback.
            Defaults to the installed feedback-jira version.

    Returns:
        Mapping with platform, brand, model, osVersion, make and appVersion
        keys, or an empty dict on unsupported platforms.
    """
    system = platform.system()

    if system == "Linux":
        brand = _linux_brand()
        os_version = platform.release()
    elif system == "Darwin":
        brand = "Apple"
        os_version = platform.mac_ver()[0] or platform.release()
    elif system == "Windows":
        brand = "Microsoft"
        os_version = platform.version()
    else:
        logger.debug("device_details_unsupported_platform", extra={"system": system})
        return {}

    platform_name = system.lower()
    model = platform.machine()

    return {
        "platform": platform_name,
        "brand": brand,
        "model": model,
        "osVersion": os_version,
        "make": f"{platform_name}, {brand}, {model}, {os_version}",
        "appVersion": app_version or get_app_version(),
    }
