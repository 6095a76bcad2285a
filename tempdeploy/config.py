# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------
# Responsibility: Resolve where temp deployments live, what gets staged and
# which CLI deploys it.
#
# Precedence (lowest to highest):
#   built-in defaults -> tempdeploy.yaml -> environment (.env is loaded first)
#
# Environment Variables:
# - TEMPDEPLOY_ROOT: Temp deployment root directory
# - TEMPDEPLOY_SOURCE: Deployable unit directory
# - TEMPDEPLOY_TOOL: Deploy CLI executable (default: sls)
# - TEMPDEPLOY_ID_LENGTH: Length of generated instance ids
# -----------------------------------------------------------------------------

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.markup import escape

from tempdeploy.core.deployer import DEFAULT_TOOL
from tempdeploy.core.lifecycle import DEFAULT_ROOT, INSTANCE_ID_LENGTH
from tempdeploy.core.stager import CONFIG_NAME, DEFAULT_SOURCE_PATH

console = Console()

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "tempdeploy.yaml"

ENV_OVERRIDES = {
    "TEMPDEPLOY_ROOT": "root",
    "TEMPDEPLOY_SOURCE": "source_path",
    "TEMPDEPLOY_TOOL": "tool",
    "TEMPDEPLOY_ID_LENGTH": "instance_id_length",
}


class ConfigError(Exception):
    """Raised when the settings file or environment holds invalid values."""

    pass


class Settings(BaseModel):
    """Validated runtime settings."""

    root: str = Field(DEFAULT_ROOT, min_length=1, description="Temp deployment root")
    source_path: str = Field(DEFAULT_SOURCE_PATH, min_length=1, description="Deployable unit")
    tool: str = Field(DEFAULT_TOOL, min_length=1, description="Deploy CLI executable")
    instance_id_length: int = Field(INSTANCE_ID_LENGTH, ge=1, le=64)
    config_name: str = Field(CONFIG_NAME, min_length=1)

    class Config:
        """Reject typos in the settings file."""

        extra = "forbid"
        str_strip_whitespace = True


def _read_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed settings file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return data


def load_settings(path: Path = CONFIG_PATH) -> Settings:
    """
    Load settings from YAML and the environment.

    Args:
        path: Settings file; a missing file means defaults.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If the file is unreadable or malformed, or a value is invalid.
    """
    load_dotenv(PROJECT_ROOT / ".env")

    if path.exists():
        data = _read_yaml(path)
    else:
        console.print(f"[yellow][CONFIG] {escape(path.name)} not found, using defaults[/yellow]")
        data = {}

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[key] = value

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
