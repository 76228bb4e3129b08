"""Exception types raised by the Gmail modules."""


class GmailMCPError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(GmailMCPError):
    """Raised when credential or token files are missing or unreadable."""


class GmailAPIError(GmailMCPError):
    """Raised when a Gmail API call fails. Carries the provider's message."""


class ToolArgumentError(GmailMCPError):
    """Raised when a tool is unknown or called with invalid arguments."""
