"""
Plugin config parsing shared by the HTTP adapters.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel

from ..core.errors import ConfigurationError

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def parse_plugin_config(
    config_cls: type[ConfigT],
    config: ConfigT | Mapping[str, Any] | None,
    **kwargs: Any,
) -> ConfigT:
    """Build a plugin config from a model, a mapping, or keyword arguments.

    Keyword arguments override keys from a mapping. Passing a model instance
    together with keyword arguments is rejected as ambiguous.

    Raises:
        ConfigurationError: If validation fails
    """
    if isinstance(config, config_cls):
        if kwargs:
            raise ConfigurationError(
                f"{config_cls.__name__}: pass either a config object or keywords"
            )
        return config
    data: dict[str, Any] = dict(config or {})
    data.update(kwargs)
    try:
        return config_cls(**data)
    except Exception as e:
        raise ConfigurationError(
            f"Invalid {config_cls.__name__}: {e}", cause=e
        ) from e

