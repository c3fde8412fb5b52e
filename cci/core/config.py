"""Typed pipeline configuration.

Two sources feed the pipeline:

- ``ci/cci.toml`` (optional): project layout and tool settings. Every field
  has a default that matches the coder-cli repository, so the file only
  needs to list overrides.
- The process environment: ``GOOS``, ``GOARCH`` and ``CI``. Pipeline
  commands take no flags, these variables are their only inputs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "BrewConfig",
    "CONFIG_RELATIVE_PATH",
    "ConfigError",
    "DocsConfig",
    "EnvSettings",
    "IntegrationConfig",
    "LintConfig",
    "ProjectConfig",
    "ReleaseConfig",
    "UnitTestConfig",
    "load_config",
    "load_config_or_default",
    "load_env",
]

CONFIG_RELATIVE_PATH = Path("ci") / "cci.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Config file could not be read or has the wrong shape."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Naming and build inputs for release artifacts."""

    tool_name: str = "coder-cli"
    binary_name: str = "coder"
    main_package: str = "./cmd/coder"
    version_variable: str = "cdr.dev/coder-cli/internal/version.Version"
    descriptor: str = "ci/gon.json"
    dist_dir: str = "dist"


@dataclass(frozen=True, slots=True)
class DocsConfig:
    dir: str = "docs"
    aggregate_name: str = "coder_cli_all_docs.md"


@dataclass(frozen=True, slots=True)
class LintConfig:
    config: str = ".golangci.yml"


@dataclass(frozen=True, slots=True)
class UnitTestConfig:
    # Import-path fragments whose packages are left to other stages.
    exclude: tuple[str, ...] = ("pkg/tcli", "ci/integration", "coder-sdk")


@dataclass(frozen=True, slots=True)
class IntegrationConfig:
    dockerfile: str = "ci/integration/Dockerfile"
    image: str = "coder-cli-integration:latest"
    package: str = "./ci/integration"


@dataclass(frozen=True, slots=True)
class BrewConfig:
    formula_path: str = "coder.rb"
    description: str = "A command-line tool for the Coder remote development platform"
    homepage: str = "https://github.com/cdr/coder-cli"


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Main configuration container."""

    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    lint: LintConfig = field(default_factory=LintConfig)
    unit_test: UnitTestConfig = field(default_factory=UnitTestConfig)
    integration: IntegrationConfig = field(default_factory=IntegrationConfig)
    brew: BrewConfig = field(default_factory=BrewConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ProjectConfig:
        """Create config from a parsed TOML mapping, filling in defaults."""
        release: StrDict = get_table(data, "release") or {}
        docs: StrDict = get_table(data, "docs") or {}
        lint: StrDict = get_table(data, "lint") or {}
        unit_test: StrDict = get_table(data, "test") or {}
        integration: StrDict = get_table(data, "integration") or {}
        brew: StrDict = get_table(data, "brew") or {}

        r = ReleaseConfig()
        d = DocsConfig()
        i = IntegrationConfig()
        b = BrewConfig()
        exclude = get_str_list(unit_test, "exclude")

        return cls(
            release=ReleaseConfig(
                tool_name=get_str(release, "tool_name") or r.tool_name,
                binary_name=get_str(release, "binary_name") or r.binary_name,
                main_package=get_str(release, "main_package") or r.main_package,
                version_variable=get_str(release, "version_variable") or r.version_variable,
                descriptor=get_str(release, "descriptor") or r.descriptor,
                dist_dir=get_str(release, "dist_dir") or r.dist_dir,
            ),
            docs=DocsConfig(
                dir=get_str(docs, "dir") or d.dir,
                aggregate_name=get_str(docs, "aggregate_name") or d.aggregate_name,
            ),
            lint=LintConfig(config=get_str(lint, "config") or LintConfig().config),
            unit_test=UnitTestConfig(
                exclude=UnitTestConfig().exclude if exclude is None else exclude,
            ),
            integration=IntegrationConfig(
                dockerfile=get_str(integration, "dockerfile") or i.dockerfile,
                image=get_str(integration, "image") or i.image,
                package=get_str(integration, "package") or i.package,
            ),
            brew=BrewConfig(
                formula_path=get_str(brew, "formula_path") or b.formula_path,
                description=get_str(brew, "description") or b.description,
                homepage=get_str(brew, "homepage") or b.homepage,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to cci.toml

    Returns:
        Ok(ProjectConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ProjectConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load the config file at ``path``, or defaults when it does not exist.

    A file that exists but is broken is still an error.
    """
    if not path.exists():
        return Ok(ProjectConfig())
    return load_config(path)


@dataclass(frozen=True, slots=True)
class EnvSettings:
    """Pipeline inputs taken from the environment."""

    goos: str | None = None
    goarch: str | None = None
    ci: bool = False


def load_env(environ: Mapping[str, str]) -> EnvSettings:
    """Read ``GOOS``, ``GOARCH`` and ``CI``.

    Empty values count as unset. ``CI`` is on for any non-empty value.
    """
    return EnvSettings(
        goos=environ.get("GOOS") or None,
        goarch=environ.get("GOARCH") or None,
        ci=bool(environ.get("CI")),
    )
