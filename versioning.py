"""Application name and version.

The CLI, the QApplication metadata and pyproject.toml all read from here.
"""
from __future__ import annotations

from dataclasses import dataclass


APP_NAME: str = "WatchFaces"
APP_EXE_NAME: str = "watchfaces"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = "Preview analog and digital watch faces with ambient mode."
APP_ORGANIZATION: str = "WatchFaces"


@dataclass(frozen=True)
class VersionInfo:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(version_str: str = APP_VERSION) -> VersionInfo:
    """Parse ``MAJOR.MINOR.PATCH``; missing parts read as 0, junk as ``0.0.0``."""
    try:
        parts = [int(p) for p in str(version_str).split(".")[:3]]
    except ValueError:
        return VersionInfo(0, 0, 0)
    parts += [0] * (3 - len(parts))
    return VersionInfo(*parts)


def version_string() -> str:
    """``'WatchFaces 1.0.0'``, as printed by ``--version``."""
    return f"{APP_NAME} {parse_version()}"
