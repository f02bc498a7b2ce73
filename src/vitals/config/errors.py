"""Configuration error types."""


class ConfigurationError(RuntimeError):
    """A setting is missing, malformed, or outside its allowed range."""

    @classmethod
    def required(cls, name: str) -> "ConfigurationError":
        return cls(f"Required environment variable {name!r} is not set")

    @classmethod
    def not_parseable(cls, name: str, raw: str, kind: str) -> "ConfigurationError":
        return cls(f"Environment variable {name!r} must be {kind} (got {raw!r})")

    @classmethod
    def invalid_value(cls, name: str, value, reason: str = "") -> "ConfigurationError":
        msg = f"Invalid value for {name}: {value!r}"
        if reason:
            msg += f". {reason}"
        return cls(msg)

    @classmethod
    def not_configured(cls, dependency: str, setting: str) -> "ConfigurationError":
        """A dependency whose credential or endpoint is absent."""
        return cls(f"{dependency} not configured ({setting} is not set)")


__all__ = ["ConfigurationError"]
