"""Deployment request resolution from command-line options and environment."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Mapping, Optional

from ecdeploy.constants import DESKTOP_TARGETS, TARGET_ESX
from ecdeploy.models import DeployRequest, VSphereConnection
from ecdeploy.utils import get_env


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value if value.strip() else None


def _optional(value: Optional[str]) -> Optional[str]:
    """Optional values are kept verbatim; only an empty string counts as absent."""
    return value or None


def _path(value: Optional[str]) -> Optional[Path]:
    value = _clean(value)
    return Path(value) if value is not None else None


def build_request(args: argparse.Namespace, env: Optional[Mapping[str, str]] = None) -> DeployRequest:
    """Map parsed options onto a DeployRequest.

    The vSphere password may come from ``GOVC_PASSWORD`` so it never has to
    appear in the process arguments; ``-p`` takes precedence when given.
    """
    if env is None:
        env = os.environ
    password = _clean(args.password) or _clean(get_env("GOVC_PASSWORD", env=env))
    return DeployRequest(
        target=_clean(args.hypervisor),
        ova_path=_path(args.ova),
        vm_name=_clean(args.vm_name),
        root_password=_optional(args.root_password),
        firstboot_path=_path(args.firstboot),
        service_url=_optional(args.service_url),
        vsphere=VSphereConnection(
            url=_clean(args.url),
            username=_clean(args.username),
            password=password,
            datastore=_clean(args.datastore),
            network=_clean(args.network),
            datacenter=_clean(args.datacenter),
            insecure=bool(args.insecure),
        ),
        vm_library_dir=_path(args.vm_library),
    )


def missing_arguments(request: DeployRequest) -> List[str]:
    """List every required option the selected target still lacks."""
    missing: List[str] = []
    if not request.target:
        missing.append("missing -v arg")
    if request.ova_path is None:
        missing.append("missing -o arg")
    if not request.vm_name:
        missing.append("missing -m arg")

    if request.target == TARGET_ESX:
        vs = request.vsphere
        for flag, value in (
            ("-l", vs.url),
            ("-u", vs.username),
            ("-p", vs.password),
            ("-d", vs.datastore),
            ("-n", vs.network),
            ("-z", vs.datacenter),
        ):
            if not value:
                missing.append(f"missing {flag} arg")
    elif request.target in DESKTOP_TARGETS:
        if request.vm_library_dir is None:
            missing.append("missing -t arg")
    return missing
