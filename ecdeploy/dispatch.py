"""Route a deployment request to its target."""

from __future__ import annotations

from typing import List

from ecdeploy.constants import DESKTOP_TARGETS, TARGET_ESX
from ecdeploy.desktop import deploy_to_desktop
from ecdeploy.esx import deploy_to_esx
from ecdeploy.exceptions import PreconditionError
from ecdeploy.models import DeployRequest, EncodedPayload, HostPlatform, Toolchain


def dispatch(
    request: DeployRequest,
    toolchain: Toolchain,
    host: HostPlatform,
    payload: EncodedPayload,
) -> None:
    if request.target == TARGET_ESX:
        deploy_to_esx(request, toolchain, payload)
    elif request.target in DESKTOP_TARGETS:
        deploy_to_desktop(request, toolchain, host, payload)
    else:
        raise PreconditionError([f"Unknown hypervisor {request.target}"])


def describe_plan(request: DeployRequest, toolchain: Toolchain) -> List[str]:
    """Human-readable list of the external commands a run would execute."""
    if request.target == TARGET_ESX:
        vm = request.vm_name
        return [
            f"{toolchain.govc} import.ova -options - {request.ova_path}",
            f"{toolchain.govc} vm.change -e guestinfo.*=... -vm {vm}",
            f"{toolchain.govc} vm.power -on {vm}",
        ]
    if request.target in DESKTOP_TARGETS:
        vm_dir = request.vm_library_dir / request.vm_name
        vmrun = f"{toolchain.vmrun} -T {request.target}"
        return [
            f"mkdir -p {request.vm_library_dir}",
            f"{toolchain.ovftool} {request.ova_path} {vm_dir}",
            f"append guestinfo.* lines to {vm_dir}/**/*.vmx",
            f"{vmrun} start <vmx> nogui",
            f"{vmrun} list",
            f"{vmrun} getGuestIPAddress <vmx> -wait",
        ]
    raise PreconditionError([f"Unknown hypervisor {request.target}"])
