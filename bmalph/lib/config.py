"""
Configuration loaders for bmalph.

Loads the project config written by `bmalph init` (bmalph/config.json).
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from . import validate
from .constants import BMALPH_DIR, CONFIG_FILE, DEFAULT_PROJECT_NAME

logger = logging.getLogger(__name__)


@dataclass
class ProjectConfig:
    """Project-level configuration from bmalph/config.json"""
    name: str


def get_config_path(project_dir: Path) -> Path:
    return project_dir / BMALPH_DIR / CONFIG_FILE


def load_project_config(project_dir: Path) -> ProjectConfig:
    """Load bmalph/config.json and return ProjectConfig.

    Raises:
        FileNotFoundError: if the config file doesn't exist
        ValidationError: if the file is not valid JSON or fails the schema
    """
    data = validate.validate_file(get_config_path(project_dir), "config")
    return ProjectConfig(name=data["name"])


def resolve_project_name(project_dir: Path, warnings: list[str] | None = None) -> str:
    """Best-effort project name lookup.

    A missing config silently falls back to the default name. An unreadable
    or invalid config also falls back, but is reported through `warnings`.
    """
    try:
        return load_project_config(project_dir).name
    except FileNotFoundError:
        logger.debug(f"No config at {get_config_path(project_dir)}, using default project name")
    except (validate.ValidationError, OSError, UnicodeDecodeError) as e:
        message = f"Could not read project config, using default name '{DEFAULT_PROJECT_NAME}': {e}"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
    return DEFAULT_PROJECT_NAME
