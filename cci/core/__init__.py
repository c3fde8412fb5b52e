"""Core domain types and logic."""

from .config import ConfigError, EnvSettings, ProjectConfig, load_config, load_env
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "EnvSettings",
    "ProjectConfig",
    "load_config",
    "load_env",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
