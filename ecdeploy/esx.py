"""ESXi / vCenter deployment through govc."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from ecdeploy.exceptions import DeployError
from ecdeploy.models import DeployRequest, EncodedPayload, ImportOptions, Toolchain, VSphereConnection
from ecdeploy.payload import build_import_options, guest_params
from ecdeploy.utils import log, run


class GovcClient:
    """Thin wrapper running govc with an explicit connection environment."""

    def __init__(self, govc: Path, connection: VSphereConnection) -> None:
        self.govc = govc
        self.connection = connection

    def _secrets(self, *extra: str) -> List[str]:
        return [self.connection.password or "", *extra]

    def _run(self, args: List[str], input: Optional[str] = None, secrets: Tuple[str, ...] = ()) -> None:
        run(
            [str(self.govc), *args],
            input=input,
            env=self.connection.as_env(),
            secrets=self._secrets(*secrets),
        )

    def import_ova(self, ova: Path, options: ImportOptions) -> None:
        secrets = tuple(value for _, value in options.property_mapping if value)
        self._run(["import.ova", "-options", "-", str(ova)], input=options.to_json(), secrets=secrets)

    def change_extra_config(self, vm_name: str, pairs: List[Tuple[str, str]]) -> None:
        args = ["vm.change"]
        for key, value in pairs:
            args.extend(["-e", f"{key}={value}"])
        args.extend(["-vm", vm_name])
        secrets = tuple(value for _, value in pairs if value)
        self._run(args, secrets=secrets)

    def power_on(self, vm_name: str) -> None:
        self._run(["vm.power", "-on", vm_name])


def deploy_to_esx(request: DeployRequest, toolchain: Toolchain, payload: EncodedPayload) -> None:
    if toolchain.govc is None:
        raise DeployError("govc command not resolved")
    if request.ova_path is None or not request.vm_name:
        raise DeployError("OVA path and VM name are required")

    params = guest_params(payload, request.service_url)
    options = build_import_options(request, params)
    client = GovcClient(toolchain.govc, request.vsphere)

    log("INFO", f"Importing {request.ova_path} as '{request.vm_name}' on {request.vsphere.url}")
    client.import_ova(request.ova_path, options)

    # PropertyMapping in the import options does not reliably reach the guest,
    # so the guestinfo keys are set again as extraConfig on the VM.
    log("INFO", "Setting guestinfo keys on the imported VM")
    client.change_extra_config(request.vm_name, params.as_pairs())

    log("INFO", f"Powering on '{request.vm_name}'")
    client.power_on(request.vm_name)

    log("SUCCESS", f"Imported and powered on '{request.vm_name}' VM on {request.vsphere.url}")
