"""Release build data model.

Artifact names are a pure function of (tool, OS, arch, tag). Nothing
time- or machine-dependent goes into them, so a rebuild of the same tag
produces the same file name on any runner.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cci.platform.detection import TargetOS

__all__ = ["Artifact", "ReleaseContext", "artifact_name"]


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Inputs of one release build.

    Attributes:
        target_os: Validated target OS.
        target_arch: ``GOARCH`` value, used verbatim.
        version_tag: Version embedded in the binary and the artifact name.
        workspace: Temporary directory owned by this build only.
    """

    target_os: TargetOS
    target_arch: str
    version_tag: str
    workspace: Path


@dataclass(frozen=True, slots=True)
class Artifact:
    """A finished release archive."""

    name: str
    path: Path


def artifact_name(tool: str, target_os: TargetOS, target_arch: str, version_tag: str) -> str:
    """``{tool}-{os}-{arch}-{tag}.{ext}``, e.g. ``coder-cli-linux-amd64-v1.0.0.tar.gz``."""
    return f"{tool}-{target_os.goos}-{target_arch}-{version_tag}.{target_os.archive_ext}"
