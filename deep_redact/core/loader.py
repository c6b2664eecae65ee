# deep_redact/core/loader.py

"""Configuration loader for YAML redaction profiles."""

import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from deep_redact.core.exceptions import ConfigurationError
from deep_redact.service.config import RedactionConfig

logger = logging.getLogger(__name__)

# Optional top-level section a profile may be nested under.
ROOT_SECTION = "deep_redact"


def load_config(data: Dict[str, Any]) -> RedactionConfig:
    """Validates a configuration mapping.

    Args:
        data: Configuration fields, either at the top level or nested under
            a 'deep_redact' section

    Returns:
        Validated RedactionConfig

    Raises:
        ConfigurationError: If the mapping is not a valid configuration.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(data).__name__}"
        )

    section = data[ROOT_SECTION] if ROOT_SECTION in data else data
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{ROOT_SECTION}' section must be a mapping")

    try:
        config = RedactionConfig.model_validate(section)
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Invalid redaction configuration: {e}") from e

    logger.info(
        "Configuration loaded successfully",
        extra={
            "key_count": len(config.blacklisted_keys),
            "path_count": len(config.paths),
            "string_test_count": len(config.string_tests),
        },
    )
    return config


def load_from_yaml(path: Union[str, Path]) -> RedactionConfig:
    """Loads a redaction profile from a YAML file.

    Regex segments and string tests are written as plain strings in YAML;
    pydantic compiles them where the field expects a pattern.

    Args:
        path: Path to the YAML file

    Returns:
        Validated RedactionConfig

    Raises:
        ConfigurationError: If file is missing, invalid, or empty.
    """
    config_path = Path(path)

    try:
        if not config_path.exists():
            error_msg = f"Configuration file not found: {config_path}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not data:
            raise ConfigurationError("Configuration file is empty or invalid")

        return load_config(data)

    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error: {e}", exc_info=True)
        raise ConfigurationError(f"Failed to parse {config_path.name}: {e}") from e
    except ConfigurationError:
        raise
    except OSError as e:
        logger.error(f"Configuration loading failed: {e}", exc_info=True)
        raise ConfigurationError(f"Failed to load configuration: {e}") from e
