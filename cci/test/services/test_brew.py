from __future__ import annotations

from pathlib import Path

import pytest

from cci.core.config import BrewConfig, ReleaseConfig
from cci.core.result import Err, Ok
from cci.services.brew import FormulaError, render_formula, write_formula

SHA = "a" * 64


def _render(version: str = "v1.14.2", sha256: str = SHA) -> str:
    result = render_formula(version, sha256, release=ReleaseConfig(), brew=BrewConfig())
    assert isinstance(result, Ok)
    return result.value


def test_formula_points_at_macos_artifact() -> None:
    text = _render()

    assert text.startswith("class Coder < Formula\n")
    assert (
        'url "https://github.com/cdr/coder-cli/releases/download/v1.14.2/'
        'coder-cli-darwin-amd64-v1.14.2.zip"'
    ) in text
    assert f'sha256 "{SHA}"' in text
    assert 'bin.install "coder"' in text
    assert 'system "#{bin}/coder", "--version"' in text


def test_checksum_is_lowercased() -> None:
    assert f'sha256 "{SHA}"' in _render(sha256=SHA.upper())


@pytest.mark.parametrize("sha256", ["", "abc", "g" * 64, "a" * 63])
def test_invalid_checksum(sha256: str) -> None:
    result = render_formula("v1.0.0", sha256, release=ReleaseConfig(), brew=BrewConfig())

    assert isinstance(result, Err)
    assert "invalid sha256" in result.error.message


def test_empty_version() -> None:
    result = render_formula("", SHA, release=ReleaseConfig(), brew=BrewConfig())

    assert result == Err(FormulaError("version must not be empty"))


def test_class_name_follows_binary() -> None:
    result = render_formula(
        "v1.0.0", SHA, release=ReleaseConfig(binary_name="coder-cli"), brew=BrewConfig()
    )

    assert isinstance(result, Ok)
    assert result.value.startswith("class CoderCli < Formula")


def test_write_formula(tmp_path: Path) -> None:
    path = tmp_path / "coder.rb"

    result = write_formula(path, "v1.0.0", SHA, release=ReleaseConfig(), brew=BrewConfig())

    assert result == Ok(path)
    assert path.read_text(encoding="utf-8") == _render("v1.0.0")


def test_write_formula_invalid_input_leaves_file(tmp_path: Path) -> None:
    path = tmp_path / "coder.rb"
    path.write_text("previous", encoding="utf-8")

    result = write_formula(path, "v1.0.0", "bad", release=ReleaseConfig(), brew=BrewConfig())

    assert isinstance(result, Err)
    assert path.read_text(encoding="utf-8") == "previous"
