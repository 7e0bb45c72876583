"""
Session Watcher Module

Polls a session until Claude Code reports completion or the session goes
away, redrawing a status header and the tail of the pane on every tick.
Watching never mutates the session; Ctrl+C (KeyboardInterrupt) propagates to
the caller at any point, including during the sleep between ticks.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape

from .commands import tail_non_blank
from .exceptions import CcxError, GatewayError, SessionNotFoundError
from .status import SessionStatus, classify
from ..tmux.gateway import TmuxGateway

logger = logging.getLogger(__name__)


class WatchState(Enum):
    """States of the watch loop. Only POLLING is non-terminal."""
    POLLING = "polling"
    DONE = "done"
    VANISHED = "vanished"


class SessionWatcher:
    """
    Watches a single session until it completes or disappears.

    Each tick checks the session still exists, classifies its title, redraws
    the display and either stops (DONE) or sleeps for the interval.
    """

    def __init__(self,
                 gateway: TmuxGateway,
                 console: Optional[Console] = None,
                 capture_lines: int = 20,
                 tail_lines: int = 15,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize session watcher.

        Args:
            gateway: Tmux gateway used for every query
            console: Rich console to render to
            capture_lines: Lines of pane history captured per tick
            tail_lines: Non-blank lines shown per tick
            sleep: Sleep function, replaceable in tests
        """
        self.gateway = gateway
        self.console = console or Console()
        self.capture_lines = capture_lines
        self.tail_lines = tail_lines
        self._sleep = sleep

    def watch(self, session_name: str, interval: float = 2.0) -> WatchState:
        """
        Run the watch loop.

        Args:
            session_name: Session to watch
            interval: Seconds to sleep between ticks

        Returns:
            WatchState: DONE or VANISHED

        Raises:
            SessionNotFoundError: If the session does not exist at start
        """
        if interval <= 0:
            raise CcxError(f"Watch interval must be positive, got {interval}")
        if not self.gateway.session_exists(session_name):
            raise SessionNotFoundError(session_name)

        self.console.print(f"Watching session: {escape(session_name)} (Ctrl+C to stop)")
        self.console.print()

        state = WatchState.POLLING
        while state is WatchState.POLLING:
            state = self.tick(session_name)
            if state is WatchState.POLLING:
                self._sleep(interval)

        logger.info(f"Stopped watching {session_name}: {state.value}")
        return state

    def tick(self, session_name: str) -> WatchState:
        """Run one poll of the loop and return the resulting state."""
        if not self.gateway.session_exists(session_name):
            self.console.print()
            self.console.print(f"[yellow]Session '{escape(session_name)}' no longer exists[/yellow]")
            return WatchState.VANISHED

        try:
            title = self.gateway.get_pane_title(session_name)
        except GatewayError as e:
            logger.debug(f"Title unavailable for {session_name}: {e}")
            title = ""
        status = classify(title)

        self._render(session_name, status, self._recent_lines(session_name))

        if status is SessionStatus.DONE:
            self.console.print()
            self.console.print("[green]Session completed.[/green]")
            return WatchState.DONE

        return WatchState.POLLING

    def _recent_lines(self, session_name: str) -> Optional[List[str]]:
        try:
            content = self.gateway.capture_pane(session_name, self.capture_lines)
        except GatewayError as e:
            logger.debug(f"Capture unavailable for {session_name}: {e}")
            return None
        return tail_non_blank(content, self.tail_lines)

    def _render(self, session_name: str, status: SessionStatus, lines: Optional[List[str]]) -> None:
        self.console.clear()
        self.console.print(f"Session: {session_name}", markup=False)
        self.console.print(f"Status: {status.label}", markup=False)
        self.console.print()

        for line in lines or []:
            self.console.print(line, markup=False, highlight=False)
