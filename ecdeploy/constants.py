"""Global constants and default paths for ec-ova-deploy."""

from __future__ import annotations

import os
from pathlib import Path

TARGET_ESX = "esx"
TARGET_FUSION = "fusion"
TARGET_WORKSTATION = "ws"
TARGETS = (TARGET_ESX, TARGET_FUSION, TARGET_WORKSTATION)
DESKTOP_TARGETS = (TARGET_FUSION, TARGET_WORKSTATION)

# Guest parameters read by the first-boot agent inside the appliance.
GUESTINFO_FIRSTBOOT = "guestinfo.ec.firstboot"
GUESTINFO_ROOT_PASSWD = "guestinfo.root.passwd"
GUESTINFO_SERVICE_URL = "guestinfo.ec.url"
GUESTINFO_SHELL_ENABLED = "guestinfo.shell.enabled"
GUESTINFO_SSH_ENABLED = "guestinfo.ssh.enabled"
GUESTINFO_ENABLED = "True"

# Network name baked into the OVF descriptor.
OVF_DEFAULT_NETWORK = "VM Network"

DEFAULT_FUSION_PATH = Path("/Applications/VMware Fusion.app")
DEFAULT_WORKSTATION_PATH = Path("/usr/local/vmware-workstation")

FUSION_VMRUN = Path("Contents/Public/vmrun")
FUSION_OVFTOOL = Path("Contents/Library/VMware OVF Tool/ovftool")
WORKSTATION_VMRUN = Path("bin/vmrun")
WORKSTATION_OVFTOOL = Path("bin/ovftool")

SUPPORTED_SYSTEMS = {"Linux", "Darwin"}
# Desktop virtualization on macOS has no Rosetta path.
DARWIN_MACHINES = {"x86_64"}

# vmnet devices must be o+rw for a nested VM to get DHCP (VMware KB 287).
VMNET_GLOB = "vmnet*"
DEV_DIR = Path("/dev")

TRUTHY = {"1", "true", "yes", "on"}

_LOG_VERBOSE = os.environ.get("LOG_VERBOSE", "").lower() in TRUTHY

_SENSITIVE_FIELDS = {"password", "root_password"}
