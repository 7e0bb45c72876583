"""
Session Commands Module

Lifecycle operations (start, stop, attach, send) and the read-only status
views. Each operation is a short orchestration of the tmux gateway plus
validation; failures propagate unchanged and nothing is retried.
"""

import logging
import shlex
from pathlib import Path
from typing import List, NoReturn, Optional

from .directory import SessionDirectory, SessionSummary, Session
from .exceptions import InvalidWorkingDirectoryError, SessionNotFoundError
from .naming import SESSION_PREFIX, generate_session_name
from ..tmux.gateway import TmuxGateway

logger = logging.getLogger(__name__)


def build_agent_command(prompt: str, agent_command: str = "claude") -> str:
    """
    Build the shell command line that launches the agent with a prompt.

    The prompt becomes one shell-quoted argument so quotes, ``$`` and
    backticks inside it are passed through literally.
    """
    return f"{agent_command} {shlex.quote(prompt)}"


def tail_non_blank(content: str, count: int) -> List[str]:
    """Return the last ``count`` lines of ``content`` that are not blank."""
    if count <= 0:
        return []
    lines = [line for line in content.splitlines() if line.strip()]
    return lines[-count:]


class SessionCommands:
    """
    Lifecycle commands for ccx sessions.

    Features:
    - Start sessions running the agent with a prompt
    - Stop, attach to and message existing sessions
    - Status and list views over the session directory
    """

    def __init__(self,
                 gateway: TmuxGateway,
                 directory: Optional[SessionDirectory] = None,
                 prefix: str = SESSION_PREFIX,
                 agent_command: str = "claude"):
        """
        Initialize session commands.

        Args:
            gateway: Tmux gateway used for every tmux call
            directory: Session directory (built from the gateway if omitted)
            prefix: Namespace prefix for new session names
            agent_command: Executable launched inside new sessions
        """
        self.gateway = gateway
        self.directory = directory or SessionDirectory(gateway, prefix=prefix)
        self.prefix = prefix
        self.agent_command = agent_command

    def require_session(self, session_name: str) -> None:
        """Raise SessionNotFoundError unless the session exists."""
        if not self.gateway.session_exists(session_name):
            raise SessionNotFoundError(session_name)

    def start(self, prompt: str, working_directory: Optional[str] = None) -> str:
        """
        Start a new agent session.

        Args:
            prompt: Prompt handed to the agent as its first argument
            working_directory: Optional directory to start the session in

        Returns:
            str: Name of the new session
        """
        cwd = None
        if working_directory:
            path = Path(working_directory).expanduser()
            if not path.is_dir():
                raise InvalidWorkingDirectoryError(working_directory)
            cwd = str(path.resolve())

        session_name = generate_session_name(self.prefix)
        command = build_agent_command(prompt, self.agent_command)
        self.gateway.create_session(session_name, command, working_directory=cwd)

        logger.info(f"Started session {session_name} (cwd={cwd or 'inherited'})")
        return session_name

    def stop(self, session_name: str) -> None:
        """Kill a session after confirming it exists."""
        self.require_session(session_name)
        self.gateway.kill_session(session_name)

    def attach(self, session_name: str) -> NoReturn:
        """Hand the terminal over to the session. Never returns on success."""
        self.require_session(session_name)
        self.gateway.attach_session(session_name)

    def send(self, session_name: str, message: str) -> None:
        """Type a message into a session and submit it."""
        self.require_session(session_name)
        self.gateway.send_keys(session_name, message)

    def recent_output(self, session_name: str, lines: int) -> List[str]:
        """
        Last non-blank lines of a session's pane.

        Raises:
            SessionNotFoundError: If the session does not exist
            CaptureError: If the capture failed after the existence check
        """
        self.require_session(session_name)
        content = self.gateway.capture_pane(session_name, lines)
        return tail_non_blank(content, lines)

    def summaries(self) -> List[SessionSummary]:
        """Managed sessions with title, status and working directory."""
        return self.directory.summaries()

    def sessions(self) -> List[Session]:
        """Managed sessions sorted by name."""
        return self.directory.list_sorted()
