"""Session lifecycle and status inference."""

from .commands import SessionCommands
from .directory import Session, SessionDirectory, SessionSummary
from .exceptions import (
    CaptureError,
    CcxError,
    ConfigError,
    GatewayError,
    InvalidWorkingDirectoryError,
    SessionNotFoundError,
)
from .naming import SESSION_PREFIX, generate_session_name
from .status import SessionStatus, classify
from .watcher import SessionWatcher, WatchState

__all__ = [
    'SessionCommands',
    'Session', 'SessionDirectory', 'SessionSummary',
    'CcxError', 'SessionNotFoundError', 'GatewayError', 'CaptureError',
    'ConfigError', 'InvalidWorkingDirectoryError',
    'SESSION_PREFIX', 'generate_session_name',
    'SessionStatus', 'classify',
    'SessionWatcher', 'WatchState',
]
