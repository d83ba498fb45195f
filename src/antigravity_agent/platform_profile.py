"""
Description of the operating system the companion is running on
"""

import platform
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class OsKind(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


_SYSTEM_TO_KIND = {
    "Windows": OsKind.WINDOWS,
    "Darwin": OsKind.MACOS,
    "Linux": OsKind.LINUX,
}

# platform.machine() spellings normalised to the names used in reports
_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i386": "x86",
    "i686": "x86",
}


@dataclass(frozen=True)
class PlatformProfile:
    """OS kind, CPU architecture and OS family"""

    os_kind: OsKind
    arch: str
    family: str

    def as_dict(self) -> dict[str, str]:
        return {"os": self.os_kind.value, "arch": self.arch, "family": self.family}


def build_profile(system: str, machine: str) -> PlatformProfile:
    """Build a profile from platform.system()/platform.machine() style strings"""
    kind = _SYSTEM_TO_KIND.get(system, OsKind.OTHER)
    arch = machine.lower() or "unknown"
    arch = _ARCH_ALIASES.get(arch, arch)
    family = "windows" if kind is OsKind.WINDOWS else "unix"
    return PlatformProfile(os_kind=kind, arch=arch, family=family)


@lru_cache(maxsize=1)
def detect() -> PlatformProfile:
    """Profile of the running interpreter, computed once per process"""
    return build_profile(platform.system(), platform.machine())
