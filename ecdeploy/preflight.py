"""Tooling precondition checks for ec-ova-deploy."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import List, Mapping, Optional

from ecdeploy.config import missing_arguments
from ecdeploy.constants import (
    DEFAULT_FUSION_PATH,
    DEFAULT_WORKSTATION_PATH,
    FUSION_OVFTOOL,
    FUSION_VMRUN,
    TARGET_ESX,
    TARGET_FUSION,
    TARGET_WORKSTATION,
    WORKSTATION_OVFTOOL,
    WORKSTATION_VMRUN,
)
from ecdeploy.exceptions import PreconditionError
from ecdeploy.models import DeployRequest, Toolchain
from ecdeploy.utils import get_env, is_executable

_INSTALL_HINTS = {
    TARGET_FUSION: ("VMware Fusion.app", "FUSIONPATH"),
    TARGET_WORKSTATION: ("VMware Workstation", "WSPATH"),
}


def _which(name: str, override_var: str, env: Mapping[str, str]) -> Optional[Path]:
    override = get_env(override_var, env=env)
    if override:
        return Path(override)
    found = shutil.which(name, path=get_env("PATH", env=env))
    return Path(found) if found else None


def resolve_toolchain(target: Optional[str], env: Optional[Mapping[str, str]] = None) -> Toolchain:
    """Locate the external tools the given target needs.

    Paths are resolved but not validated; see check_preconditions().
    """
    if env is None:
        env = os.environ
    if target == TARGET_ESX:
        return Toolchain(govc=_which("govc", "GOVC", env))
    if target == TARGET_FUSION:
        install_dir = Path(get_env("FUSIONPATH", env=env) or DEFAULT_FUSION_PATH)
        return Toolchain(
            install_dir=install_dir,
            vmrun=install_dir / FUSION_VMRUN,
            ovftool=install_dir / FUSION_OVFTOOL,
            sudo=_which("sudo", "SUDO", env),
        )
    if target == TARGET_WORKSTATION:
        install_dir = Path(get_env("WSPATH", env=env) or DEFAULT_WORKSTATION_PATH)
        return Toolchain(
            install_dir=install_dir,
            vmrun=install_dir / WORKSTATION_VMRUN,
            ovftool=install_dir / WORKSTATION_OVFTOOL,
            sudo=_which("sudo", "SUDO", env),
        )
    return Toolchain()


def check_preconditions(request: DeployRequest, toolchain: Toolchain) -> List[str]:
    """Collect every unmet precondition instead of stopping at the first one."""
    problems = missing_arguments(request)

    if request.target == TARGET_ESX:
        if not is_executable(toolchain.govc):
            problems.append("missing govc command")
    elif request.target in _INSTALL_HINTS:
        product, env_var = _INSTALL_HINTS[request.target]
        install_dir = toolchain.install_dir
        if install_dir is None or not install_dir.is_dir():
            problems.append(
                f"missing {product}, if installed at location other than '{install_dir}', "
                f"please export env var {env_var} pointing to correct path"
            )
        else:
            for tool in (toolchain.vmrun, toolchain.ovftool):
                if not is_executable(tool):
                    problems.append(f"missing '{tool}' command")

    if request.firstboot_path is not None and not request.firstboot_path.is_file():
        problems.append(f"missing file {request.firstboot_path}")
    return problems


def validate(request: DeployRequest, toolchain: Toolchain) -> None:
    problems = check_preconditions(request, toolchain)
    if problems:
        raise PreconditionError(problems)
