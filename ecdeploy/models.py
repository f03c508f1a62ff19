"""Data models for ec-ova-deploy."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ecdeploy.constants import (
    GUESTINFO_ENABLED,
    GUESTINFO_FIRSTBOOT,
    GUESTINFO_ROOT_PASSWD,
    GUESTINFO_SERVICE_URL,
    GUESTINFO_SHELL_ENABLED,
    GUESTINFO_SSH_ENABLED,
)


@dataclass
class VSphereConnection:
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    datastore: Optional[str] = None
    network: Optional[str] = None
    datacenter: Optional[str] = None
    insecure: bool = False

    def as_env(self) -> Dict[str, str]:
        """Return the GOVC_* variables govc reads its connection from."""
        return {
            "GOVC_URL": self.url or "",
            "GOVC_USERNAME": self.username or "",
            "GOVC_PASSWORD": self.password or "",
            "GOVC_DATASTORE": self.datastore or "",
            "GOVC_NETWORK": self.network or "",
            "GOVC_DATACENTER": self.datacenter or "",
            "GOVC_INSECURE": "1" if self.insecure else "",
        }


@dataclass
class DeployRequest:
    target: Optional[str]
    ova_path: Optional[Path]
    vm_name: Optional[str]
    root_password: Optional[str] = None
    firstboot_path: Optional[Path] = None
    service_url: Optional[str] = None
    vsphere: VSphereConnection = field(default_factory=VSphereConnection)
    vm_library_dir: Optional[Path] = None


@dataclass
class EncodedPayload:
    firstboot: str = ""
    root_password: str = ""


@dataclass
class GuestParams:
    firstboot: str = ""
    root_password: str = ""
    service_url: str = ""
    shell_enabled: str = GUESTINFO_ENABLED
    ssh_enabled: str = GUESTINFO_ENABLED

    def as_pairs(self) -> List[Tuple[str, str]]:
        """All five keys, unset optional values written as empty strings."""
        return [
            (GUESTINFO_FIRSTBOOT, self.firstboot),
            (GUESTINFO_ROOT_PASSWD, self.root_password),
            (GUESTINFO_SERVICE_URL, self.service_url),
            (GUESTINFO_SHELL_ENABLED, self.shell_enabled),
            (GUESTINFO_SSH_ENABLED, self.ssh_enabled),
        ]

    def vmx_lines(self) -> List[str]:
        """``key=value`` lines for a .vmx file; unset optional values are omitted."""
        lines = []
        for key, value in self.as_pairs():
            if key in (GUESTINFO_SHELL_ENABLED, GUESTINFO_SSH_ENABLED) or value:
                lines.append(f"{key}={value}")
        return lines


@dataclass
class NetworkMapping:
    name: str
    network: str


@dataclass
class ImportOptions:
    """Options document accepted by ``govc import.ova -options``."""

    name: str
    property_mapping: List[Tuple[str, str]]
    network_mapping: List[NetworkMapping]
    disk_provisioning: str = "thin"
    ip_allocation_policy: str = "dhcpPolicy"
    ip_protocol: str = "IPv4"
    mark_as_template: bool = False
    power_on: bool = False
    inject_ovf_env: bool = False
    wait_for_ip: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "DiskProvisioning": self.disk_provisioning,
            "IPAllocationPolicy": self.ip_allocation_policy,
            "IPProtocol": self.ip_protocol,
            "PropertyMapping": [{"key": key, "value": value} for key, value in self.property_mapping],
            "NetworkMapping": [{"Name": nm.name, "Network": nm.network} for nm in self.network_mapping],
            "MarkAsTemplate": self.mark_as_template,
            "PowerOn": self.power_on,
            "InjectOvfEnv": self.inject_ovf_env,
            "WaitForIP": self.wait_for_ip,
            "Name": self.name,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class HostPlatform:
    system: str  # "Linux", "Darwin", ...
    machine: str


@dataclass
class Toolchain:
    govc: Optional[Path] = None
    ovftool: Optional[Path] = None
    vmrun: Optional[Path] = None
    sudo: Optional[Path] = None
    install_dir: Optional[Path] = None
