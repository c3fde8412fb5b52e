"""Release build and packaging."""

from .builder import WORKSPACE_PREFIX, ReleaseBuilder
from .errors import BuildError, PackagingError, ReleaseError, UnsupportedPlatformError
from .model import Artifact, ReleaseContext, artifact_name
from .packagers import LinuxPackager, MacOSPackager, Packager, WindowsPackager, packager_for

__all__ = [
    "WORKSPACE_PREFIX",
    "Artifact",
    "BuildError",
    "LinuxPackager",
    "MacOSPackager",
    "PackagingError",
    "Packager",
    "ReleaseBuilder",
    "ReleaseContext",
    "ReleaseError",
    "UnsupportedPlatformError",
    "WindowsPackager",
    "artifact_name",
    "packager_for",
]
