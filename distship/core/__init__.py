"""Core types: results, exit codes, configuration and project detection."""

from .config import ConfigError, ShipConfig, load_config, load_config_or_default
from .errors import ErrorCode
from .project import Project, ProjectError, detect_project
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "ShipConfig",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # project
    "Project",
    "ProjectError",
    "detect_project",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
