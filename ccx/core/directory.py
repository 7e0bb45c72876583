"""
Session Directory Module

Read-side view of the sessions ccx manages. Every call re-queries tmux;
nothing is cached between calls. Per-session details (title, status and
working directory) are only fetched when a view asks for them, and a failure
for one session degrades to an empty value instead of aborting the scan.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import GatewayError
from .naming import SESSION_PREFIX, is_managed
from .status import SessionStatus, classify
from ..tmux.gateway import TmuxGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """A live tmux session owned by ccx."""
    name: str
    attached: bool


@dataclass(frozen=True)
class SessionSummary:
    """A session joined with its live title, status and working directory."""
    name: str
    attached: bool
    title: str
    status: SessionStatus
    working_directory: Optional[str] = None


class SessionDirectory:
    """Lists and describes the ccx-managed sessions on the tmux server."""

    def __init__(self, gateway: TmuxGateway, prefix: str = SESSION_PREFIX):
        self.gateway = gateway
        self.prefix = prefix

    def list_managed(self) -> List[Session]:
        """
        List managed sessions in the order tmux reports them.

        Sessions whose name lacks the namespace prefix are dropped.
        """
        return [
            Session(name=info.name, attached=info.attached)
            for info in self.gateway.list_sessions()
            if is_managed(info.name, self.prefix)
        ]

    def list_sorted(self) -> List[Session]:
        """List managed sessions sorted by name for stable tabular output."""
        return sorted(self.list_managed(), key=lambda session: session.name)

    def title(self, session_name: str) -> str:
        """Pane title of a session, or an empty string if it can't be read."""
        try:
            return self.gateway.get_pane_title(session_name)
        except GatewayError as e:
            logger.debug(f"No title for {session_name}: {e}")
            return ""

    def working_directory(self, session_name: str) -> Optional[str]:
        """Current pane directory, or None when unavailable."""
        return self.gateway.get_pane_working_directory(session_name)

    def describe(self, session: Session) -> SessionSummary:
        """Join a session with its live title, status and working directory."""
        title = self.title(session.name)
        return SessionSummary(
            name=session.name,
            attached=session.attached,
            title=title,
            status=classify(title),
            working_directory=self.working_directory(session.name)
        )

    def summaries(self) -> List[SessionSummary]:
        """Describe every managed session."""
        return [self.describe(session) for session in self.list_managed()]
