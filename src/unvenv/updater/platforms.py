"""Platform detection and release target triples."""

from __future__ import annotations

import platform

from unvenv.constants import UNKNOWN_TARGET
from unvenv.updater.models import PlatformTarget

# (os, arch) -> target triple used in artifact file names
TARGET_TRIPLES: dict[tuple[str, str], str] = {
    ("macos", "x86_64"): "x86_64-apple-darwin",
    ("macos", "aarch64"): "aarch64-apple-darwin",
    ("linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("windows", "x86_64"): "x86_64-pc-windows-msvc",
}

_OS_ALIASES = {
    "darwin": "macos",
    "macos": "macos",
    "linux": "linux",
    "windows": "windows",
    "win32": "windows",
}

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def resolve_target(os_name: str, arch: str) -> str:
    """Return the target triple for *os_name*/*arch*, or ``"unknown"``.

    Unknown combinations are not an error: the artifact URL built from
    ``"unknown"`` simply 404s at download time.
    """
    return TARGET_TRIPLES.get((os_name, arch), UNKNOWN_TARGET)


def normalize_os(system: str) -> str:
    value = system.strip().lower()
    return _OS_ALIASES.get(value, value)


def normalize_arch(machine: str) -> str:
    value = machine.strip().lower()
    return _ARCH_ALIASES.get(value, value)


def detect_platform(system: str | None = None, machine: str | None = None) -> PlatformTarget:
    """Build the ``PlatformTarget`` for this process (or the given overrides)."""
    os_name = normalize_os(system if system is not None else platform.system())
    arch = normalize_arch(machine if machine is not None else platform.machine())
    return PlatformTarget(os_name=os_name, arch=arch, triple=resolve_target(os_name, arch))
