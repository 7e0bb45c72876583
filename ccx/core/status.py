"""
Session Status Module

Infers a coarse session status from the pane title that Claude Code sets.
Claude Code renders a braille spinner while working and switches the leading
glyph to an eight-spoked asterisk when it has finished.
"""

from enum import Enum

DONE_GLYPH = "✳"
BRAILLE_FIRST = "⠁"  # U+2800 is the blank cell and carries no signal
BRAILLE_LAST = "⣿"


class SessionStatus(Enum):
    """Coarse status of a managed session."""
    IN_PROGRESS = "working"
    DONE = "done"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        """Human readable label."""
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.label


def classify(title: str) -> SessionStatus:
    """
    Classify a pane title into a session status.

    Only the first non-whitespace character is inspected, so trailing
    descriptive text never changes the result.

    Args:
        title: Raw pane title, possibly empty

    Returns:
        SessionStatus: DONE, IN_PROGRESS or UNKNOWN
    """
    stripped = title.strip()
    if not stripped:
        return SessionStatus.UNKNOWN

    first = stripped[0]
    if first == DONE_GLYPH:
        return SessionStatus.DONE
    if BRAILLE_FIRST <= first <= BRAILLE_LAST:
        return SessionStatus.IN_PROGRESS
    return SessionStatus.UNKNOWN
