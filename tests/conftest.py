"""Shared test fixtures."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from ecdeploy.models import DeployRequest, HostPlatform, Toolchain, VSphereConnection


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform(system="Linux", machine="x86_64")


@pytest.fixture
def esx_request(tmp_path) -> DeployRequest:
    """A complete esx request without any optional guest values."""
    return DeployRequest(
        target="esx",
        ova_path=tmp_path / "ec.ova",
        vm_name="ec-vm",
        vsphere=VSphereConnection(
            url="https://esx.example.com/sdk",
            username="root",
            password="vc-secret",
            datastore="datastore1",
            network="Lab Network",
            datacenter="dc1",
        ),
    )


@pytest.fixture
def ws_request(tmp_path) -> DeployRequest:
    """A complete Workstation request whose VM library does not exist yet."""
    return DeployRequest(
        target="ws",
        ova_path=tmp_path / "ec.ova",
        vm_name="ec-vm",
        vm_library_dir=tmp_path / "library",
    )


@pytest.fixture
def esx_toolchain(tmp_path) -> Toolchain:
    return Toolchain(govc=make_executable(tmp_path / "bin" / "govc"))


@pytest.fixture
def ws_toolchain(tmp_path) -> Toolchain:
    install_dir = tmp_path / "vmware-workstation"
    return Toolchain(
        install_dir=install_dir,
        vmrun=make_executable(install_dir / "bin" / "vmrun"),
        ovftool=make_executable(install_dir / "bin" / "ovftool"),
        sudo=Path("/usr/bin/sudo"),
    )


_DEPLOY_ENV_VARS = ["GOVC_PASSWORD", "GOVC", "SUDO", "FUSIONPATH", "WSPATH"]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear every environment variable the deployer reads."""
    for key in _DEPLOY_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
