"""Homebrew formula generation.

The formula installs the notarized macOS artifact published for a release
tag. It is regenerated after each release with the artifact's checksum.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from cci.core.config import BrewConfig, ReleaseConfig
from cci.core.result import Err, Ok, Result
from cci.platform.detection import TargetOS
from cci.platform.files import FileError, atomic_write_text

from .release.model import artifact_name

__all__ = ["FormulaError", "render_formula", "write_formula"]

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")

# Homebrew formulas ship the amd64 build; it also runs under Rosetta.
_FORMULA_ARCH = "amd64"


@dataclass(frozen=True, slots=True)
class FormulaError:
    message: str


def _formula_class(binary_name: str) -> str:
    return "".join(part.capitalize() for part in re.split(r"[-_]", binary_name) if part)


def render_formula(
    version: str,
    sha256: str,
    *,
    release: ReleaseConfig,
    brew: BrewConfig,
) -> Result[str, FormulaError]:
    """Render the formula for ``version``.

    Args:
        version: Release tag, e.g. ``v1.14.2``.
        sha256: Hex checksum of the macOS artifact.
    """
    if not version:
        return Err(FormulaError("version must not be empty"))
    sha256 = sha256.lower()
    if not _SHA256_RE.match(sha256):
        return Err(FormulaError(f"invalid sha256 checksum: {sha256!r}"))

    artifact = artifact_name(release.tool_name, TargetOS.MACOS, _FORMULA_ARCH, version)
    url = f"{brew.homepage}/releases/download/{version}/{artifact}"
    binary = release.binary_name

    return Ok(
        f"""class {_formula_class(binary)} < Formula
  desc "{brew.description}"
  homepage "{brew.homepage}"
  url "{url}"
  sha256 "{sha256}"

  bottle :unneeded

  def install
    bin.install "{binary}"
  end

  test do
    system "#{{bin}}/{binary}", "--version"
  end
end
"""
    )


def write_formula(
    path: Path,
    version: str,
    sha256: str,
    *,
    release: ReleaseConfig,
    brew: BrewConfig,
) -> Result[Path, FormulaError | FileError]:
    """Render and write the formula to ``path``."""
    rendered = render_formula(version, sha256, release=release, brew=brew)
    if isinstance(rendered, Err):
        return rendered

    try:
        atomic_write_text(path, rendered.value)
    except OSError as e:
        return Err(FileError(message=f"write {path}: {e}", path=path))
    return Ok(path)
