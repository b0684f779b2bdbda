from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a simulation component is constructed with an unusable configuration."""
