"""
ccx - Claude Code sessions in tmux

Starts Claude Code in named, detached tmux sessions and keeps track of them:
- Namespaced session names (ccx-xxxxxxxx)
- Status inference from the pane title (working / done / unknown)
- start, status, list, stop, attach, send and watch commands
"""

__version__ = "0.3.0"

from .core.commands import SessionCommands
from .core.directory import Session, SessionDirectory, SessionSummary
from .core.exceptions import (
    CaptureError,
    CcxError,
    ConfigError,
    GatewayError,
    InvalidWorkingDirectoryError,
    SessionNotFoundError,
)
from .core.naming import SESSION_PREFIX, generate_session_name
from .core.status import SessionStatus, classify
from .core.watcher import SessionWatcher, WatchState
from .tmux.gateway import TmuxGateway
from .utils.config_loader import ConfigLoader, Settings
from .cli.cli import CcxCLI

__all__ = [
    # Core
    'SessionCommands',
    'Session', 'SessionDirectory', 'SessionSummary',
    'SessionStatus', 'classify',
    'SessionWatcher', 'WatchState',
    'SESSION_PREFIX', 'generate_session_name',

    # Errors
    'CcxError', 'SessionNotFoundError', 'GatewayError', 'CaptureError',
    'ConfigError', 'InvalidWorkingDirectoryError',

    # Infrastructure
    'TmuxGateway',
    'ConfigLoader', 'Settings',

    # CLI
    'CcxCLI',

    '__version__',
]


def get_version():
    """Get the current version of ccx."""
    return __version__
