"""
Custom exception classes for the solana.fm bot.

Provides typed exceptions so the chat layer can report failures instead of crashing.
"""

class BotException(Exception):
    """Base exception for all bot-related errors."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationException(BotException):
    """Raised when configuration is invalid."""
    pass


class NetworkException(BotException):
    """Raised when network/RPC operations fail."""
    pass


class FetchException(NetworkException):
    """Raised when the transfer history API cannot be queried."""
    pass


class ParseException(BotException):
    """Raised when an API payload does not have the expected shape."""
    pass


class CommandException(BotException):
    """Raised when a chat command has missing or malformed arguments."""
    pass
