"""
Session Naming Module

Generates namespaced tmux session names such as ``ccx-1a2b3c4d``.
"""

import itertools
import os
import time

SESSION_PREFIX = "ccx-"

# Odd stride so two names drawn within the same clock tick still differ
_SEQUENCE_STRIDE = 0x9E3779B1
# Process-wide draw counter. It is the module's only mutable state and only
# feeds name entropy; nothing reads it back.
_sequence = itertools.count()


def _rand_id() -> int:
    """Mix the nanosecond clock with the process id into 32 bits."""
    value = time.time_ns() + os.getpid() + next(_sequence) * _SEQUENCE_STRIDE
    return value & 0xFFFFFFFF


def generate_session_name(prefix: str = SESSION_PREFIX) -> str:
    """
    Generate a unique session name.

    Args:
        prefix: Namespace prefix marking the session as managed by ccx

    Returns:
        str: Prefix followed by 8 lowercase hex digits
    """
    return f"{prefix}{_rand_id():08x}"


def is_managed(session_name: str, prefix: str = SESSION_PREFIX) -> bool:
    """Check whether a session name carries the ccx namespace prefix."""
    return session_name.startswith(prefix)
