"""Configuration for nesbridge.

Values are layered: model defaults, then a TOML file, then ``NESBRIDGE_*``
environment variables.
"""
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, Field

ENV_PREFIX = "NESBRIDGE"
DEFAULT_CONFIG_FILE = "~/.config/nesbridge/config.toml"


class ServerConfig(BaseModel):
    """Loopback file server settings."""

    host: str = Field("127.0.0.1", description="Loopback address to bind and accept")
    port: int = Field(8080, description="Fixed port for the local file server")
    probe_timeout: float = Field(5.0, description="Startup health probe timeout in seconds")


class PathsConfig(BaseModel):
    """Filesystem locations."""

    bundle_dir: str = Field("~/.local/share/nesbridge/bundle", description="Emulator HTML/JS/WASM bundle")
    library_dir: str = Field("~/.local/share/nesbridge/roms", description="Imported ROM files")
    work_dir: str = Field(
        default_factory=lambda: f"/tmp/nesbridge-{os.getenv('USER', 'nobody')}/Emulator",
        description="Server root directory, rebuilt on every start",
    )


class InputConfig(BaseModel):
    """Input bridge preferences."""

    auto_sprint: bool = Field(False, description="Hold B while a horizontal direction is held")
    haptics: bool = Field(True, description="Pulse haptics on each forwarded transition")
    sprint_interval: float = Field(0.1, description="Auto-sprint repeat interval in seconds")


class RecoveryConfig(BaseModel):
    """White-screen recovery settings."""

    delay: float = Field(5.0, description="Wait after a reload before probing")
    probe_timeout: float = Field(5.0, description="Liveness probe timeout in seconds")
    max_attempts: int = Field(3, description="Consecutive failed probes before giving up")
    min_content_size: int = Field(100, description="Minimum rendered content size counted as alive")


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field("INFO", description="Root log level")


class Config(BaseModel):
    """Complete nesbridge configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    recovery: RecoveryConfig = Field(default_factory=RecoveryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


_config: Optional[Config] = None


def generate_env_var_name(section: str, field: str) -> str:
    """Build the environment variable name for a config field."""
    return f"{ENV_PREFIX}_{section.upper()}_{field.upper()}"


def get_all_env_mappings() -> Dict[str, Tuple[str, str]]:
    """Map every overridable environment variable to its (section, field)."""
    mappings = {}
    for section, section_field in Config.model_fields.items():
        section_model = section_field.annotation
        for field in section_model.model_fields:
            mappings[generate_env_var_name(section, field)] = (section, field)
    return mappings


def _convert_env_value(value: str) -> Union[bool, int, float, str]:
    """Convert an environment string to bool, int, float or str, in that order."""
    lowered = value.lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        return value


def load_all_env_overrides() -> Dict[str, Dict[str, Any]]:
    """Collect all ``NESBRIDGE_*`` overrides present in the environment."""
    overrides: Dict[str, Dict[str, Any]] = {}
    for env_var, (section, field) in get_all_env_mappings().items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        overrides.setdefault(section, {})[field] = _convert_env_value(value)
    return overrides


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Explicit TOML path. Falls back to ``NESBRIDGE_CONFIG_FILE``
            and then the default location. A missing file means defaults.

    Returns:
        The resolved configuration
    """
    if config_path is None:
        config_path = os.environ.get(f"{ENV_PREFIX}_CONFIG_FILE", DEFAULT_CONFIG_FILE)

    data: Dict[str, Any] = {}
    path = Path(config_path).expanduser()
    if path.is_file():
        with open(path, "rb") as f:
            data = tomllib.load(f)

    data = _merge(data, load_all_env_overrides())
    return Config(**data)


def get_config() -> Config:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the process-wide configuration."""
    global _config
    _config = config


def _format_toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_env_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def dump_config_toml(config: Config) -> str:
    """Render a config as TOML."""
    blocks = []
    for section, values in config.model_dump().items():
        lines = [f"[{section}]"]
        lines.extend(f"{key} = {_format_toml_value(value)}" for key, value in values.items())
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def dump_config_env(config: Config) -> str:
    """Render a config as ``NESBRIDGE_*=value`` lines."""
    lines = []
    for section, values in config.model_dump().items():
        for key, value in values.items():
            lines.append(f"{generate_env_var_name(section, key)}={_format_env_value(value)}")
    return "\n".join(lines)
