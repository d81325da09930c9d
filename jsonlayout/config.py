"""
Layout configuration: defaults, validation and YAML loading.
"""

from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, Dict, Mapping, Optional

import yaml

from jsonlayout.errors import ConfigError
from jsonlayout.record import Inline, Nested, Placement

DEFAULT_FIELDS = {'message': '%(message)s'}
DEFAULT_MAX_LENGTH_KB = 20


@dataclass(frozen=True)
class LayoutConfig:
    """
    Immutable layout configuration.

    Attributes:
        fields: Output field name -> template (str or callable)
        prefix: Literal string prepended to every encoded line
        include_context: Merge context data into each event
        context_field_name: Nest context under this key; inline when None
        canonical: Sort top-level keys when encoding
        max_length_kb: Budget for the JSON body in kilobytes
    """
    fields: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_FIELDS))
    prefix: str = ''
    include_context: bool = False
    context_field_name: Optional[str] = None
    canonical: bool = False
    max_length_kb: float = DEFAULT_MAX_LENGTH_KB

    def __post_init__(self):
        if not isinstance(self.fields, Mapping) or not self.fields:
            raise ConfigError("fields must be a non-empty mapping of name to template")
        for name, template in self.fields.items():
            if not isinstance(name, str):
                raise ConfigError(f"Invalid field name: {name!r}")
            if not (isinstance(template, str) or callable(template)):
                raise ConfigError(f"Invalid template for field {name}: must be a string or callable")

        # message is always the first field
        ordered = dict(self.fields)
        if 'message' in ordered:
            ordered = {'message': ordered.pop('message'), **ordered}
        object.__setattr__(self, 'fields', ordered)

        if not isinstance(self.prefix, str):
            raise ConfigError(f"Invalid prefix: {self.prefix!r}")
        for flag in ('include_context', 'canonical'):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigError(f"Invalid {flag}: must be true or false")
        if self.context_field_name is not None and (
            not isinstance(self.context_field_name, str) or not self.context_field_name
        ):
            raise ConfigError(f"Invalid context_field_name: {self.context_field_name!r}")
        if isinstance(self.max_length_kb, bool) or not isinstance(self.max_length_kb, (int, float)):
            raise ConfigError(f"Invalid max_length_kb: {self.max_length_kb!r}")
        if self.max_length_kb <= 0:
            raise ConfigError(f"Invalid max_length_kb: {self.max_length_kb}. Must be positive")

    @property
    def budget(self) -> float:
        """Budget in bytes"""
        return self.max_length_kb * 1024

    @property
    def placement(self) -> Placement:
        if self.context_field_name:
            return Nested(self.context_field_name)
        return Inline()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LayoutConfig':
        """
        Build a config from a plain mapping

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        if not isinstance(data, Mapping):
            raise ConfigError(f"Layout config must be a mapping, got {type(data).__name__}")

        known = {f.name for f in dataclass_fields(cls)}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise ConfigError(f"Unknown configuration items: {', '.join(unknown)}")

        return cls(**dict(data))


def load_config(config_path) -> LayoutConfig:
    """
    Parse and validate a YAML layout configuration

    Args:
        config_path: Path to the YAML file; a top-level 'layout' key is unwrapped

    Returns:
        LayoutConfig: Validated configuration

    Raises:
        ConfigError: If the file is missing or the configuration is invalid
    """
    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}")

    if data is None:
        data = {}
    if isinstance(data, Mapping) and set(data) == {'layout'}:
        data = data['layout'] or {}

    return LayoutConfig.from_dict(data)
