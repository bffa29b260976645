from __future__ import annotations

from config.loader import DISPLAY_NAMES, Backend


class GatewayError(Exception):
    """Failures raised by the gateway itself rather than by a backend."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnknownTool(GatewayError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidArgument(GatewayError):
    pass


class ServiceNotConfigured(GatewayError):
    def __init__(self, backend: Backend) -> None:
        prefix = backend.env_prefix
        super().__init__(
            f"{DISPLAY_NAMES[backend]} is not configured. Set {prefix}_URL and {prefix}_API_KEY."
        )
        self.backend = backend


class ConfigurationError(GatewayError):
    pass
