"""Settings controlling how object constraints read named-field records.

Settings can be loaded from a dictionary, a YAML or JSON file, or environment
variables, and environment variables override file values:

    JSVAL_FIELD_NAMING   exact | case_insensitive | metadata
    JSVAL_METADATA_KEY   metadata key used for tag-based naming

Example:
    ```yaml
    # jsval.yaml
    field_naming: metadata
    metadata_key: json
    ```

    ```python
    settings = JsvalSettings.from_file("jsval.yaml").apply_environment_overrides()
    constraint = ObjectConstraint(settings=settings)
    ```
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

import yaml

from .accessor import (
    FieldLookup,
    FieldNames,
    case_insensitive_field_name,
    declared_field_names,
    exact_field_name,
    metadata_field_name,
    metadata_field_names,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FIELD_NAMING_MODES = ("exact", "case_insensitive", "metadata")


@dataclass(frozen=True)
class JsvalSettings:
    """Settings for object constraint validation.

    Attributes:
        field_naming: How property names map onto named-field records
        metadata_key: Field metadata key consulted when field_naming is "metadata"
    """

    ENV_PREFIX = "JSVAL_"

    field_naming: str = "exact"
    metadata_key: str = "json"

    def __post_init__(self) -> None:
        if self.field_naming not in FIELD_NAMING_MODES:
            raise ConfigurationError(
                f"Invalid field_naming: {self.field_naming}",
                context={"field_naming": self.field_naming, "allowed": list(FIELD_NAMING_MODES)},
            )
        if not self.metadata_key:
            raise ConfigurationError("metadata_key cannot be empty")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JsvalSettings:
        """Create settings from a dictionary, ignoring unknown keys.

        Args:
            data: Settings dictionary

        Returns:
            JsvalSettings instance
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown jsval settings: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> JsvalSettings:
        """Load settings from a YAML or JSON file.

        Args:
            path: Path to the settings file

        Returns:
            JsvalSettings instance

        Raises:
            ConfigurationError: If the file is missing or has an unsupported format
        """
        path = Path(path).resolve()

        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}")

        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported file format: {suffix}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping: {path}",
                context={"type": type(data).__name__},
            )

        logger.debug(f"Loaded jsval settings from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> JsvalSettings:
        """Create settings from environment variables only."""
        return cls().apply_environment_overrides(environ)

    def apply_environment_overrides(
        self, environ: Mapping[str, str] | None = None
    ) -> JsvalSettings:
        """Return a copy with ``JSVAL_*`` environment variables applied.

        Args:
            environ: Environment mapping (default: os.environ)

        Returns:
            New JsvalSettings instance
        """
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for f in fields(self):
            env_var = f"{self.ENV_PREFIX}{f.name.upper()}"
            if env_var in environ:
                value = environ[env_var].strip()
                overrides[f.name] = value.lower() if f.name == "field_naming" else value
                logger.debug(f"Applying environment override {env_var}")

        if not overrides:
            return self
        data = self.to_dict()
        data.update(overrides)
        return JsvalSettings(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def field_strategies(self) -> Tuple[FieldNames, FieldLookup]:
        """Return the (field_names, field_lookup) strategies for these settings."""
        if self.field_naming == "case_insensitive":
            return declared_field_names, case_insensitive_field_name
        if self.field_naming == "metadata":
            return metadata_field_names(self.metadata_key), metadata_field_name(self.metadata_key)
        return declared_field_names, exact_field_name
