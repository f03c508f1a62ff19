"""VMware Fusion / Workstation deployment through ovftool and vmrun."""

from __future__ import annotations

import stat
from pathlib import Path
from typing import List, Optional

from ecdeploy.constants import DEV_DIR, VMNET_GLOB
from ecdeploy.exceptions import DeployError, PreconditionError
from ecdeploy.models import DeployRequest, EncodedPayload, HostPlatform, Toolchain
from ecdeploy.payload import guest_params
from ecdeploy.utils import ensure_directory, log, run

_OTHER_RW = stat.S_IROTH | stat.S_IWOTH


def find_vmx(vm_dir: Path) -> Path:
    """Return the single .vmx file ovftool produced under vm_dir."""
    matches = sorted(p for p in vm_dir.rglob("*.vmx") if p.is_file())
    if not matches:
        raise DeployError(f"No .vmx file found under {vm_dir}")
    if len(matches) > 1:
        found = ", ".join(str(p) for p in matches)
        raise DeployError(f"Expected exactly one .vmx file under {vm_dir}, found: {found}")
    return matches[0]


def append_vmx_lines(vmx: Path, lines: List[str]) -> None:
    if not lines:
        return
    existing = vmx.read_bytes()
    with open(vmx, "a") as f:
        if existing and not existing.endswith(b"\n"):
            f.write("\n")
        for line in lines:
            f.write(line + "\n")


def vmnet_devices_needing_access(dev_dir: Path = DEV_DIR) -> List[Path]:
    """vmnet devices that are not yet readable and writable by everyone."""
    lacking = []
    for dev in sorted(dev_dir.glob(VMNET_GLOB)):
        mode = dev.stat().st_mode
        if mode & _OTHER_RW != _OTHER_RW:
            lacking.append(dev)
    return lacking


class DesktopDeployer:
    """Import an OVA into a local VM library and boot it with vmrun."""

    def __init__(self, request: DeployRequest, toolchain: Toolchain, host: HostPlatform) -> None:
        if request.vm_library_dir is None or not request.vm_name or request.ova_path is None:
            raise DeployError("OVA path, VM name and VM library directory are required")
        if toolchain.ovftool is None or toolchain.vmrun is None:
            raise DeployError("ovftool/vmrun commands not resolved")
        self.request = request
        self.toolchain = toolchain
        self.host = host
        self.target = request.target
        self.vm_dir = request.vm_library_dir / request.vm_name
        self.vmx: Optional[Path] = None

    def _vmrun(self, *args: str, capture: bool = False):
        return run([str(self.toolchain.vmrun), "-T", self.target, *args], capture=capture)

    def import_ova(self) -> None:
        ensure_directory(self.request.vm_library_dir)
        log("INFO", f"Importing {self.request.ova_path} into {self.vm_dir}")
        run([str(self.toolchain.ovftool), str(self.request.ova_path), str(self.vm_dir)])
        self.vmx = find_vmx(self.vm_dir)

    def configure_guest(self, payload: EncodedPayload) -> None:
        if self.vmx is None:
            raise DeployError("VM has not been imported")
        lines = guest_params(payload, self.request.service_url).vmx_lines()
        append_vmx_lines(self.vmx, lines)
        log("DEBUG", f"Appended {len(lines)} guestinfo entries to {self.vmx}")

    def enable_vmnet_promiscuous_mode(self) -> None:
        # Nested VMs only get DHCP when vmnet devices accept promiscuous mode,
        # which on Linux hosts requires o+rw on /dev/vmnet*.
        if self.host.system != "Linux":
            return
        lacking = vmnet_devices_needing_access()
        if not lacking:
            log("DEBUG", "vmnet devices already allow read/write by all")
            return
        if self.toolchain.sudo is None:
            raise PreconditionError(["missing sudo command (needed to chmod vmnet devices)"])
        log("INFO", f"Granting read/write on {', '.join(str(d) for d in lacking)}")
        run([str(self.toolchain.sudo), "chmod", "a+rw", *[str(d) for d in lacking]])

    def start(self) -> str:
        if self.vmx is None:
            raise DeployError("VM has not been imported")
        self.enable_vmnet_promiscuous_mode()
        self._vmrun("start", str(self.vmx), "nogui")
        self._vmrun("list")
        log("INFO", "Waiting for VM to acquire IP...")
        result = self._vmrun("getGuestIPAddress", str(self.vmx), "-wait", capture=True)
        return (result.stdout or "").strip()


def deploy_to_desktop(
    request: DeployRequest,
    toolchain: Toolchain,
    host: HostPlatform,
    payload: EncodedPayload,
) -> Path:
    deployer = DesktopDeployer(request, toolchain, host)
    deployer.import_ova()
    deployer.configure_guest(payload)
    ip = deployer.start()
    if ip:
        log("INFO", f"Guest IP address: {ip}")
    log("SUCCESS", f"Imported and powered on '{deployer.vmx}'")
    return deployer.vmx
