"""Host platform detection for ec-ova-deploy."""

from __future__ import annotations

import platform

from ecdeploy.constants import DARWIN_MACHINES, SUPPORTED_SYSTEMS
from ecdeploy.exceptions import PreconditionError
from ecdeploy.models import HostPlatform
from ecdeploy.utils import log


def detect_platform() -> HostPlatform:
    """Return the host OS name and machine hardware name (``uname -s``/``-m``)."""
    host = HostPlatform(system=platform.system(), machine=platform.machine())
    log("DEBUG", f"Host platform: {host.system} {host.machine}")
    return host


def check_platform(host: HostPlatform) -> None:
    if host.system not in SUPPORTED_SYSTEMS:
        raise PreconditionError([f"unsupported OS: {host.system}"])
    if host.system == "Darwin" and host.machine not in DARWIN_MACHINES:
        raise PreconditionError(
            [
                f"unsupported machine hardware platform {host.machine}, "
                "only Intel (x86_64) is supported"
            ]
        )
