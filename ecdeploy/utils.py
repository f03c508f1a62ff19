"""Utility functions for ec-ova-deploy."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from ecdeploy.constants import _LOG_VERBOSE, TRUTHY
from ecdeploy.exceptions import CommandError

_STDERR_LEVELS = {"WARN", "ERROR"}


def log(level: str, message: str) -> None:
    """Lightweight structured logging with coloured level tags."""
    if level == "DEBUG" and not _LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    stream = sys.stderr if level in _STDERR_LEVELS else sys.stdout
    print(f"{colour}[{level}]{reset} {message}", file=stream, flush=True)


def get_env(name: str, default: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    source = os.environ if env is None else env
    return source.get(name, default)


def get_env_bool(name: str, default: bool = False, env: Optional[Mapping[str, str]] = None) -> bool:
    raw = get_env(name, env=env)
    if raw is None:
        return default
    return raw.lower() in TRUTHY


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def is_executable(path: Optional[Path]) -> bool:
    return path is not None and path.is_file() and os.access(path, os.X_OK)


def mask_secrets(cmd: Iterable[str], secrets: Iterable[str]) -> str:
    """Render a command line for logging with secret values blanked out."""
    rendered = shlex.join(str(part) for part in cmd)
    for secret in secrets:
        if secret:
            rendered = rendered.replace(secret, "********")
    return rendered


def run(
    cmd: List[str],
    input: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    secrets: Iterable[str] = (),
    capture: bool = False,
) -> subprocess.CompletedProcess:
    """Run an external tool, raising CommandError on a non-zero exit."""
    log("DEBUG", f"Running: {mask_secrets(cmd, secrets)}")
    merged_env = None
    if env is not None:
        merged_env = dict(os.environ)
        merged_env.update(env)
    result = subprocess.run(
        [str(part) for part in cmd],
        input=input,
        env=merged_env,
        text=True,
        stdout=subprocess.PIPE if capture else None,
    )
    if result.returncode != 0:
        raise CommandError(cmd, result.returncode)
    return result
