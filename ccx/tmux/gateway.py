"""
Tmux Gateway Module

The only place where ccx talks to tmux. Every operation shells out to the
tmux binary, waits for it with a bounded timeout and converts failures into
GatewayError. The gateway never filters or caches anything; namespacing is
the SessionDirectory's job.
"""

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from typing import List, NoReturn, Optional, Sequence

from ..core.exceptions import CaptureError, GatewayError

logger = logging.getLogger(__name__)

LIST_SESSIONS_FORMAT = "#{session_name}:#{session_attached}"


@dataclass(frozen=True)
class TmuxSessionInfo:
    """A session as reported by ``tmux list-sessions``."""
    name: str
    attached: bool


def session_target(session_name: str) -> str:
    """Exact-match target for session level commands."""
    return f"={session_name}"


def pane_target(session_name: str) -> str:
    """Exact-match target for the active pane of a session."""
    return f"={session_name}:"


class TmuxGateway:
    """Thin, unopinionated proxy over the tmux command line."""

    def __init__(self,
                 tmux_binary: str = "tmux",
                 command_timeout: float = 10.0,
                 send_enter_delay: float = 0.5):
        """
        Initialize the gateway.

        Args:
            tmux_binary: Name or path of the tmux executable
            command_timeout: Seconds to wait for any single tmux invocation
            send_enter_delay: Pause between typed text and the Enter key
        """
        self.tmux_binary = tmux_binary
        self.command_timeout = command_timeout
        self.send_enter_delay = send_enter_delay

    def _run_tmux_command(self, cmd: Sequence[str]) -> subprocess.CompletedProcess:
        """
        Run a tmux command and wait for it.

        Args:
            cmd: Command arguments (without the tmux binary)

        Returns:
            CompletedProcess result, whatever its return code

        Raises:
            GatewayError: If tmux could not be launched or timed out
        """
        full_cmd = [self.tmux_binary, *cmd]
        logger.debug(f"Tmux command: {' '.join(full_cmd)}")

        try:
            result = subprocess.run(
                full_cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.command_timeout
            )
        except FileNotFoundError as e:
            logger.error(f"Tmux binary not found: {self.tmux_binary}")
            raise GatewayError(f"tmux is not installed ({self.tmux_binary} not found)") from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"Tmux command timed out after {self.command_timeout}s: {full_cmd}")
            raise GatewayError(f"tmux {cmd[0]} timed out after {self.command_timeout}s") from e
        except OSError as e:
            logger.error(f"Failed to run tmux command {full_cmd}: {e}")
            raise GatewayError(f"Failed to execute tmux: {e}") from e

        if result.returncode != 0:
            logger.warning(f"Tmux command failed (rc={result.returncode}): {result.stderr.strip()}")

        return result

    def create_session(self,
                       session_name: str,
                       command: str,
                       working_directory: Optional[str] = None) -> None:
        """
        Create a detached session running ``command``.

        Title renaming is switched on afterwards so the program inside can
        publish its status through the pane title.

        Args:
            session_name: Name for the new session
            command: Shell command line to run inside the session
            working_directory: Optional start directory

        Raises:
            GatewayError: If tmux failed or the name is already taken
        """
        cmd = ["new-session", "-d", "-s", session_name]
        if working_directory:
            cmd.extend(["-c", working_directory])
        cmd.append(command)

        result = self._run_tmux_command(cmd)
        if result.returncode != 0:
            raise GatewayError(
                f"Failed to create tmux session {session_name}: {result.stderr.strip()}"
            )

        # allow-rename is a window option and needs a window target
        rename = self._run_tmux_command(
            ["set-option", "-w", "-t", pane_target(session_name), "allow-rename", "on"]
        )
        if rename.returncode != 0:
            logger.warning(f"Could not enable allow-rename on {session_name}")

        logger.info(f"Created tmux session {session_name}")

    def list_sessions(self) -> List[TmuxSessionInfo]:
        """
        List every session on the tmux server.

        Returns:
            List of sessions in the order tmux reports them; empty when no
            server is running
        """
        result = self._run_tmux_command(["list-sessions", "-F", LIST_SESSIONS_FORMAT])
        if result.returncode != 0:
            return []

        sessions = []
        for line in result.stdout.splitlines():
            name, sep, attached = line.rpartition(":")
            if not sep or not name:
                continue
            try:
                clients = int(attached)
            except ValueError:
                logger.debug(f"Skipping malformed list-sessions line: {line!r}")
                continue
            sessions.append(TmuxSessionInfo(name=name, attached=clients > 0))

        return sessions

    def session_exists(self, session_name: str) -> bool:
        """
        Check if a tmux session exists.

        A missing tmux binary or server counts as "does not exist".
        """
        try:
            result = self._run_tmux_command(["has-session", "-t", session_target(session_name)])
            return result.returncode == 0
        except GatewayError:
            return False

    def get_pane_title(self, session_name: str) -> str:
        """
        Get the active pane title of a session.

        Raises:
            CaptureError: If the session vanished or tmux rejected the query
        """
        result = self._run_tmux_command(
            ["display-message", "-p", "-t", pane_target(session_name), "#{pane_title}"]
        )
        if result.returncode != 0:
            raise CaptureError(f"Failed to get pane title for session {session_name}")
        return result.stdout.strip()

    def get_pane_working_directory(self, session_name: str) -> Optional[str]:
        """Get the active pane's working directory, or None when unknown."""
        try:
            result = self._run_tmux_command(
                ["display-message", "-p", "-t", pane_target(session_name), "#{pane_current_path}"]
            )
        except GatewayError:
            return None

        path = result.stdout.strip()
        if result.returncode != 0 or not path:
            return None
        return path

    def capture_pane(self, session_name: str, lines: int) -> str:
        """
        Capture recent rendered content from a session's active pane.

        Args:
            session_name: Session to capture
            lines: How many lines of history to include

        Returns:
            str: Captured text

        Raises:
            CaptureError: If the session vanished or capture was rejected
        """
        result = self._run_tmux_command(
            ["capture-pane", "-p", "-t", pane_target(session_name), "-S", f"-{lines}"]
        )
        if result.returncode != 0:
            raise CaptureError(f"Failed to capture pane for session {session_name}")
        return result.stdout

    def kill_session(self, session_name: str) -> None:
        """
        Kill a tmux session.

        Raises:
            GatewayError: If the session did not exist or tmux refused
        """
        result = self._run_tmux_command(["kill-session", "-t", session_target(session_name)])
        if result.returncode != 0:
            raise GatewayError(f"Failed to kill session {session_name}: {result.stderr.strip()}")
        logger.info(f"Killed tmux session {session_name}")

    def send_keys(self, session_name: str, text: str) -> None:
        """
        Type ``text`` literally into a session and press Enter.

        Raises:
            GatewayError: If the session vanished
        """
        target = pane_target(session_name)

        # "--" stops text starting with "-" being parsed as flags
        result = self._run_tmux_command(["send-keys", "-t", target, "-l", "--", text])
        if result.returncode != 0:
            raise GatewayError(f"Failed to send keys to session {session_name}")

        if self.send_enter_delay > 0:
            time.sleep(self.send_enter_delay)

        result = self._run_tmux_command(["send-keys", "-t", target, "Enter"])
        if result.returncode != 0:
            raise GatewayError(f"Failed to send Enter to session {session_name}")

        logger.info(f"Message sent to {session_name}")

    def attach_session(self, session_name: str) -> NoReturn:
        """
        Replace the current process with an attached tmux client.

        Inside an existing tmux client the session is switched to instead.
        This call never returns on success.

        Raises:
            GatewayError: If the tmux client could not be started
        """
        if os.environ.get("TMUX"):
            argv = [self.tmux_binary, "switch-client", "-t", session_target(session_name)]
        else:
            argv = [self.tmux_binary, "attach-session", "-t", session_target(session_name)]

        logger.debug(f"Handing over to: {' '.join(argv)}")
        try:
            os.execvp(argv[0], argv)
        except OSError as e:
            raise GatewayError(f"Failed to attach to session {session_name}: {e}") from e
