"""Guest parameter encoding for ec-ova-deploy.

The first-boot document and root password are base64 encoded on a single
line so they can be embedded in a JSON string or a ``key=value`` .vmx line.
"""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Optional

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from ecdeploy.constants import OVF_DEFAULT_NETWORK
from ecdeploy.exceptions import PreconditionError
from ecdeploy.models import (
    DeployRequest,
    EncodedPayload,
    GuestParams,
    ImportOptions,
    NetworkMapping,
)
from ecdeploy.utils import log


def encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_text(value: str) -> str:
    """Encode a string exactly as given; no trailing newline is added.

    Undecodable argv bytes arrive as surrogate escapes and are restored as-is.
    """
    return encode_bytes(value.encode("utf-8", "surrogateescape"))


def encode_file(path: Path) -> str:
    if not path.is_file():
        raise PreconditionError([f"missing file {path}"])
    data = path.read_bytes()
    _check_firstboot_yaml(path, data)
    return encode_bytes(data)


def _check_firstboot_yaml(path: Path, data: bytes) -> None:
    """Warn when the first-boot document is not a YAML mapping; it is still sent verbatim."""
    try:
        parsed = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        log("WARN", f"First-boot file {path} is not valid YAML: {exc}")
        return
    if not isinstance(parsed, dict):
        log("WARN", f"First-boot file {path} should contain a YAML mapping, got {type(parsed).__name__}")


def encode_payload(request: DeployRequest) -> EncodedPayload:
    payload = EncodedPayload()
    if request.firstboot_path is not None:
        payload.firstboot = encode_file(request.firstboot_path)
    if request.root_password:
        payload.root_password = encode_text(request.root_password)
    return payload


def guest_params(payload: EncodedPayload, service_url: Optional[str]) -> GuestParams:
    return GuestParams(
        firstboot=payload.firstboot,
        root_password=payload.root_password,
        service_url=service_url or "",
    )


def build_import_options(request: DeployRequest, params: GuestParams) -> ImportOptions:
    return ImportOptions(
        name=request.vm_name or "",
        property_mapping=params.as_pairs(),
        network_mapping=[NetworkMapping(name=OVF_DEFAULT_NETWORK, network=request.vsphere.network or "")],
    )
