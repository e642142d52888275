import importlib.util
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

SOUND_NAMES = ("background", "pickup", "drop", "win")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_OVERRIDES = {
    "HANOI_DISK_COUNT": ("disk_count", int),
    "HANOI_MUTED": ("muted", lambda value: value.strip().lower() in {"1", "true", "yes", "on"}),
    "HANOI_BACKGROUND_VOLUME": ("background_volume", float),
    "HANOI_AUDIO_DIR": ("audio_dir", str),
}


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        self.config_path = config_path
        super().__init__(f"Configuration error in '{config_path}': {message}" if config_path else f"Configuration error: {message}")


def load_config(config_path: str) -> Dict[str, Any]:

    path = Path(config_path)

    if not path.exists():
        raise ConfigError("Configuration file not found", config_path)

    if not path.is_file():
        raise ConfigError("Configuration path is not a file", config_path)

    try:
        # Unique module name so several configs can be loaded side by side
        module_name = f"config_{abs(hash(str(path)))}"

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ConfigError("Cannot load configuration file", config_path)

        config_module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(config_module)

        # Every public, non-callable name is a setting
        config = {}
        for key in dir(config_module):
            if not key.startswith("_") and not callable(getattr(config_module, key)):
                config[key] = getattr(config_module, key)

        logger.info(f"Loaded configuration from {config_path} with {len(config)} settings")
        return config

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"Failed to load configuration: {e}", config_path) from e


def apply_env_overrides(config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Return a copy of ``config`` with HANOI_* environment variables applied.

    Call ``dotenv.load_dotenv()`` first to pick up a local ``.env`` file.

    Raises:
        ConfigError: If a variable cannot be converted to the setting's type
    """
    environ = os.environ if environ is None else environ
    merged = dict(config)

    for variable, (key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(variable)
        if raw is None or raw == "":
            continue
        try:
            merged[key] = convert(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {variable}: {raw!r}") from e
        logger.debug(f"Override {key}={merged[key]!r} from {variable}")

    return merged


def load_and_validate_config(config_path: str, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    config = apply_env_overrides(load_config(config_path), environ)
    errors = validate_config(config)
    if errors:
        raise ConfigError("; ".join(errors), config_path)
    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    errors = []

    errors.extend(_validate_required_fields(config))
    errors.extend(_validate_field_types(config))
    errors.extend(_validate_value_ranges(config))
    errors.extend(_validate_specific_constraints(config))

    logger.debug(f"Configuration validation found {len(errors)} errors")
    return errors


def _validate_required_fields(config: Dict[str, Any]) -> List[str]:
    """Validate that all required fields are present."""
    required_fields = {
        "disk_count",
        "min_disks",
        "max_disks",
        "muted",
        "background_volume",
        "audio_dir",
        "sound_files",
        "template_dir",
    }

    missing_fields = required_fields - set(config.keys())
    return [f"Missing required fields: {', '.join(sorted(missing_fields))}"] if missing_fields else []


def _validate_field_types(config: Dict[str, Any]) -> List[str]:
    """Validate field types."""
    errors = []

    type_checks = {
        "disk_count": int,
        "min_disks": int,
        "max_disks": int,
        "muted": bool,
        "background_volume": (int, float),
        "audio_dir": str,
        "sound_files": dict,
        "template_dir": str,
        "window_width": int,
        "window_height": int,
        "fps": int,
        "log_level": str,
    }

    for field, expected_type in type_checks.items():
        if field in config:
            value = config[field]
            wrong_bool = isinstance(value, bool) and expected_type is not bool
            if wrong_bool or not isinstance(value, expected_type):
                if isinstance(expected_type, tuple):
                    type_names = " or ".join(t.__name__ for t in expected_type)
                else:
                    type_names = expected_type.__name__
                errors.append(f"Field '{field}' must be {type_names}, got {type(value).__name__}")

    return errors


def _validate_value_ranges(config: Dict[str, Any]) -> List[str]:
    """Validate value ranges for numeric fields."""
    errors = []

    volume = config.get("background_volume")
    if isinstance(volume, (int, float)) and not isinstance(volume, bool) and not (0.0 <= volume <= 1.0):
        errors.append("Field 'background_volume' must be between 0.0 and 1.0")

    positive_fields = ["disk_count", "min_disks", "max_disks", "window_width", "window_height", "fps"]

    for field in positive_fields:
        value = config.get(field)
        if isinstance(value, int) and not isinstance(value, bool) and value <= 0:
            errors.append(f"Field '{field}' must be positive")

    level = config.get("log_level")
    if isinstance(level, str) and level.upper() not in LOG_LEVELS:
        errors.append(f"Field 'log_level' must be one of {', '.join(LOG_LEVELS)}")

    return errors


def _validate_specific_constraints(config: Dict[str, Any]) -> List[str]:
    """Validate specific field constraints."""
    errors = []

    errors.extend(_validate_disk_bounds(config))
    errors.extend(_validate_sound_files(config))
    errors.extend(_validate_paths(config))

    return errors


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_disk_bounds(config: Dict[str, Any]) -> List[str]:
    """Validate disk_count against the min_disks/max_disks window."""
    errors = []
    low, high, count = config.get("min_disks"), config.get("max_disks"), config.get("disk_count")

    if _is_int(low) and low < 2:
        errors.append("Field 'min_disks' must be at least 2")
    if _is_int(low) and _is_int(high) and low > high:
        errors.append("Field 'min_disks' cannot exceed 'max_disks'")
    elif _is_int(low) and _is_int(high) and _is_int(count) and not (low <= count <= high):
        errors.append(f"Field 'disk_count' must be between {low} and {high}")

    return errors


def _validate_sound_files(config: Dict[str, Any]) -> List[str]:
    """Validate the sound_files mapping."""
    errors = []
    sounds = config.get("sound_files")
    if isinstance(sounds, dict):
        missing = [name for name in SOUND_NAMES if name not in sounds]
        if missing:
            errors.append(f"sound_files is missing entries: {', '.join(missing)}")
        for name, filename in sounds.items():
            if not isinstance(filename, str) or not filename:
                errors.append(f"sound_files['{name}'] must be a non-empty string")
    return errors


def _validate_paths(config: Dict[str, Any]) -> List[str]:
    """Validate path fields."""
    errors = []
    for field in ("template_dir", "audio_dir"):
        directory = config.get(field)
        if isinstance(directory, str):
            path = Path(directory)
            if not path.exists():
                errors.append(f"{field} '{directory}' does not exist")
            elif not path.is_dir():
                errors.append(f"{field} '{directory}' is not a directory")
    return errors
