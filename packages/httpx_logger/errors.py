"""Exceptions raised by httpx_logger itself.

Errors raised by the wrapped client are never wrapped in these; they reach the
caller unchanged.
"""


class ConfigurationError(Exception):
    """Raised when a client cannot be decorated or undecorated."""
