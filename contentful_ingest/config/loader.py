"""Plugin option loading from YAML and JSON files."""

import importlib
import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Optional, Union

import structlog
import yaml

from ..constants import CONSTANTS
from ..core.config import ClientConfig
from ..core.config import config as default_config
from ..core.exceptions import ValidationError

logger = structlog.get_logger(__name__)

PLUGIN_OPTION_KEYS = ("access_token", "space_id", "include_level", "template_root")


class ConfigLoader:
    """Load plugin options and client settings from YAML/JSON files."""

    @staticmethod
    def load_config(
        config_path: Union[str, Path], config_type: Optional[str] = None
    ) -> dict[str, Any]:
        """Load a configuration file into a dictionary.

        Args:
            config_path: Path to configuration file
            config_type: Optional type override ('yaml', 'json')

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the format is unsupported or the file is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        file_type = (config_type or config_path.suffix.lstrip(".")).lower()
        if file_type in ("yaml", "yml"):
            return ConfigLoader._load_yaml(config_path)
        if file_type == "json":
            return ConfigLoader._load_json(config_path)
        raise ValueError(f"Unsupported config format: {file_type}")

    @staticmethod
    def _load_yaml(config_path: Path) -> dict[str, Any]:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
        logger.info("Loaded YAML config", path=str(config_path), keys=list(config.keys()))
        return config

    @staticmethod
    def _load_json(config_path: Path) -> dict[str, Any]:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {config_path}: {e}") from e
        logger.info("Loaded JSON config", path=str(config_path), keys=list(config.keys()))
        return config

    @staticmethod
    def create_client_config(
        config_dict: dict[str, Any], base_config: Optional[ClientConfig] = None
    ) -> ClientConfig:
        """Build a ClientConfig from the ``client`` section, over ``base_config``."""
        base = base_config or default_config
        client_settings = config_dict.get("client") or {}
        unknown = set(client_settings) - set(asdict(base))
        if unknown:
            raise ValueError(f"Unknown client settings: {', '.join(sorted(unknown))}")

        logger.debug("Created client config", settings=list(client_settings.keys()))
        return ClientConfig(**{**asdict(base), **client_settings})

    @staticmethod
    def create_plugin_options(
        config_dict: dict[str, Any], base_dir: Optional[Path] = None
    ) -> dict[str, Any]:
        """Translate file options into ``ContentfulPlugin`` keyword arguments.

        Credentials may reference environment variables as ``${NAME}`` and fall
        back to the ``CONTENTFUL_ACCESS_TOKEN`` and ``CONTENTFUL_SPACE_ID``
        environment variables when omitted. ``add_data_to`` is not
        read from files; the caller supplies the shared data mapping.
        """
        options = {key: config_dict[key] for key in PLUGIN_OPTION_KEYS if key in config_dict}
        for key in ("access_token", "space_id"):
            if isinstance(options.get(key), str):
                options[key] = os.path.expandvars(options[key])
        options.setdefault("access_token", os.environ.get(CONSTANTS.ENV_ACCESS_TOKEN))
        options.setdefault("space_id", os.environ.get(CONSTANTS.ENV_SPACE_ID))
        if "json" in config_dict:
            options["json_path"] = config_dict["json"]

        template_root = options.get("template_root")
        if base_dir is not None:
            options["template_root"] = Path(base_dir) / (template_root or ".")

        options["content_types"] = [
            ConfigLoader._content_type_options(item, index)
            for index, item in enumerate(config_dict.get("content_types") or [])
        ]
        return options

    @staticmethod
    def _content_type_options(item: Any, index: int) -> dict[str, Any]:
        if not isinstance(item, dict):
            raise ValidationError(
                f"{CONSTANTS.VALIDATION_PREFIX} content type at index {index} must be a mapping"
            )
        options = dict(item)
        transform = options.get("transform")
        if isinstance(transform, str):
            options["transform"] = import_callable(transform)
        return options


def import_callable(reference: str) -> Callable[..., Any]:
    """Import ``"package.module:function"`` and return the callable.

    Raises:
        ValidationError: If the reference is malformed or cannot be imported
    """
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ValidationError(
            f"{CONSTANTS.VALIDATION_PREFIX} transform \"{reference}\" "
            'must look like "module:function"'
        )
    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise ValidationError(
            f'{CONSTANTS.VALIDATION_PREFIX} transform "{reference}" could not be imported', cause=e
        ) from e
    if not callable(target):
        raise ValidationError(
            f'{CONSTANTS.VALIDATION_PREFIX} transform "{reference}" is not callable'
        )
    return target


def load_config_from_file(
    config_path: Union[str, Path],
) -> tuple[dict[str, Any], ClientConfig]:
    """Load plugin options and client settings from one file.

    Template paths in the file are resolved relative to the file's directory.
    """
    config_path = Path(config_path)
    config_dict = ConfigLoader.load_config(config_path)
    options = ConfigLoader.create_plugin_options(config_dict, base_dir=config_path.parent)
    client_config = ConfigLoader.create_client_config(config_dict)
    return options, client_config
