# src/config.py
"""Configuration management for the Draw.io sanitizer.

Environment-based configuration with type-safe getters and defaults.
These functions take an env object (settings exposed as attributes) and
return configuration values.
"""

from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any

from utils import log_op

# =============================================================================
# Constants
# =============================================================================

# Largest snippet accepted by the pipeline (0 disables the limit)
DEFAULT_MAX_SNIPPET_CHARS = 5_000_000

# Share of successful, unremarkable sanitize events that get logged
DEFAULT_EVENT_SAMPLE_RATE = 0.10


# =============================================================================
# Configuration Getters
# =============================================================================


def get_config_value(
    env: Any,
    env_key: str,
    default: int | float,
    value_type: type[int] | type[float] = int,
) -> int | float:
    """Get a configuration value from environment with type conversion.

    Args:
        env: Object exposing settings as attributes
        env_key: The environment variable name
        default: Default value if not set or on error
        value_type: Type to convert to (int or float)

    Returns:
        The configured value or default.
    """
    try:
        value = getattr(env, env_key, None)
        return value_type(value) if value else default
    except (ValueError, TypeError) as e:
        log_op(
            "config_validation_error",
            config_key=env_key,
            error=str(e),
        )
        return default


def get_max_snippet_chars(env: Any) -> int:
    """Get the maximum snippet length in characters (0 means unlimited)."""
    value = int(get_config_value(env, "DRAWIO_MAX_SNIPPET_CHARS", DEFAULT_MAX_SNIPPET_CHARS))
    return max(value, 0)


def get_event_sample_rate(env: Any) -> float:
    """Get the tail sampling rate for sanitize events, clamped to [0, 1]."""
    rate = float(
        get_config_value(env, "DRAWIO_EVENT_SAMPLE_RATE", DEFAULT_EVENT_SAMPLE_RATE, float)
    )
    return min(max(rate, 0.0), 1.0)


def env_from_mapping(mapping: Mapping[str, str]) -> SimpleNamespace:
    """Wrap a mapping such as os.environ as an attribute-style env object."""
    return SimpleNamespace(**dict(mapping))
