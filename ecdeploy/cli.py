"""CLI entry points for ec-ova-deploy."""

from __future__ import annotations

import argparse
import dataclasses
import sys
import textwrap
from typing import List, Optional

from ecdeploy.config import build_request
from ecdeploy.constants import _SENSITIVE_FIELDS, TARGETS
from ecdeploy.dispatch import describe_plan, dispatch
from ecdeploy.exceptions import CommandError, DeployError, PreconditionError
from ecdeploy.host import check_platform, detect_platform
from ecdeploy.models import DeployRequest
from ecdeploy.payload import encode_payload
from ecdeploy.preflight import resolve_toolchain, validate
from ecdeploy.utils import log

DESCRIPTION = textwrap.dedent(
    """\
    Deploys an Edge Compute ESXi .ova as a VM to a hypervisor, e.g. ESXi
    (directly or through vCenter Server), VMware Fusion or VMware Workstation.

    WARNING: This is a developer productivity helper tool. It is unsuitable for
    production purpose (due to trade-offs that weaken security).
    """
)

EPILOG = textwrap.dedent(
    """\
    hypervisor specific args:
      -v esx         requires -l -u -p -d -n -z (-p may come from GOVC_PASSWORD)
      -v fusion|ws   requires -t

    environment:
      GOVC_PASSWORD  vSphere password when -p is not given
      GOVC           path to the govc binary (default: looked up on PATH)
      FUSIONPATH     VMware Fusion.app location (default: /Applications/VMware Fusion.app)
      WSPATH         VMware Workstation location (default: /usr/local/vmware-workstation)
      SUDO           path to sudo, used to open /dev/vmnet* permissions
      LOG_VERBOSE    set to 1 to log every external command
    """
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ec-ova-deploy",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = parser.add_argument_group("common args")
    common.add_argument("-v", "--hypervisor", metavar="TYPE", help=f"Hypervisor type, one of: {', '.join(TARGETS)}")
    common.add_argument("-o", "--ova", metavar="PATH", help="Edge Compute ESXi .ova file path")
    common.add_argument("-m", "--vm-name", metavar="NAME", help="VM name to import the ova as")
    common.add_argument("-r", "--root-password", metavar="PASSWORD", help="VM root password (optional)")
    common.add_argument("-f", "--firstboot", metavar="PATH", help="Firstboot yaml file path (optional)")
    common.add_argument("-s", "--service-url", metavar="URL", help="Management service URL (optional)")

    esx = parser.add_argument_group("-v esx")
    esx.add_argument("-l", "--url", metavar="URL", help="vSphere API endpoint URL (e.g. https://host/sdk)")
    esx.add_argument("-k", "--insecure", action="store_true", help="Ignore certificate errors for the API endpoint")
    esx.add_argument("-u", "--username", metavar="USER", help="ESXi/VC account username")
    esx.add_argument("-p", "--password", metavar="PASSWORD", help="ESXi/VC account password")
    esx.add_argument("-n", "--network", metavar="NAME", help="ESXi/VC network name (e.g. 'VM Network')")
    esx.add_argument("-d", "--datastore", metavar="NAME", help="ESXi/VC datastore name (e.g. 'datastore1')")
    esx.add_argument("-z", "--datacenter", metavar="NAME", help="VC datacenter name")

    local = parser.add_argument_group("-v fusion|ws")
    local.add_argument("-t", "--vm-library", metavar="DIR", help="VM library directory to store the imported VM")

    parser.add_argument("--show-config", action="store_true", help="Show resolved deployment request and exit")
    parser.add_argument("--dry-run", action="store_true", help="Validate arguments and tooling, print the plan, then exit")
    return parser


def show_config(request: DeployRequest) -> None:
    """Print the resolved deployment request with secrets masked."""
    for field in dataclasses.fields(request):
        value = getattr(request, field.name)
        if dataclasses.is_dataclass(value):
            print(f"  {field.name}:")
            for sub_field in dataclasses.fields(value):
                sub_value = getattr(value, sub_field.name)
                if sub_field.name in _SENSITIVE_FIELDS and sub_value:
                    sub_value = "********"
                print(f"    {sub_field.name}: {sub_value}")
        elif field.name in _SENSITIVE_FIELDS and value:
            print(f"  {field.name}: ********")
        else:
            print(f"  {field.name}: {value}")


def _report_preconditions(parser: argparse.ArgumentParser, exc: PreconditionError) -> int:
    for problem in exc.problems:
        log("ERROR", problem)
    parser.print_usage(sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        host = detect_platform()
        check_platform(host)
    except PreconditionError as exc:
        return _report_preconditions(parser, exc)

    request = build_request(args)

    if args.show_config:
        show_config(request)
        return 0

    toolchain = resolve_toolchain(request.target)
    try:
        validate(request, toolchain)
        payload = encode_payload(request)
    except PreconditionError as exc:
        return _report_preconditions(parser, exc)

    if args.dry_run:
        try:
            plan = describe_plan(request, toolchain)
        except PreconditionError as exc:
            return _report_preconditions(parser, exc)
        log("INFO", f"=== Deployment plan for '{request.vm_name}' ({request.target}) ===")
        for step in plan:
            log("INFO", f"  {step}")
        log("INFO", "=== Dry-run complete (nothing executed) ===")
        return 0

    try:
        dispatch(request, toolchain, host, payload)
        return 0
    except PreconditionError as exc:
        return _report_preconditions(parser, exc)
    except CommandError as exc:
        log("ERROR", str(exc))
        return exc.returncode
    except DeployError as exc:
        log("ERROR", str(exc))
        return 1
    except KeyboardInterrupt:
        log("WARN", "Interrupted")
        return 130
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        import traceback

        traceback.print_exc()
        return 1
