"""
Exceptions Module

Error kinds raised by the ccx session controller.
"""


class CcxError(Exception):
    """Base class for all ccx errors."""
    pass


class SessionNotFoundError(CcxError):
    """Raised when a named session does not exist."""

    def __init__(self, session_name: str):
        self.session_name = session_name
        super().__init__(f"Session '{session_name}' does not exist")


class GatewayError(CcxError):
    """Raised when the tmux binary failed, was missing, or returned non-zero."""
    pass


class CaptureError(GatewayError):
    """Raised when a pane content or title query fails for an existing session."""
    pass


class ConfigError(CcxError):
    """Raised when the configuration file is unreadable or invalid."""
    pass


class InvalidWorkingDirectoryError(CcxError):
    """Raised when a requested working directory does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Working directory '{path}' does not exist")
