"""
Error taxonomy for the alert loop.

Все ошибки считаются фатальными: верхний уровень логирует и завершает процесс.
"""

from __future__ import annotations


class VaxAlertError(Exception):
    """Base class for every fatal error raised by the alert loop."""


class ConfigError(VaxAlertError):
    """Raised when required settings are missing or invalid at startup."""


class FetchError(VaxAlertError):
    """Raised on a network failure or a non-success HTTP status."""


class DecodeError(VaxAlertError):
    """Raised when the dashboard payload does not match the domain model."""


class SendError(VaxAlertError):
    """Raised when the mail transport fails to deliver a message."""


__all__ = ["VaxAlertError", "ConfigError", "FetchError", "DecodeError", "SendError"]
