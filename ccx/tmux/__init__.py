"""Tmux command-line gateway."""

from .gateway import TmuxGateway, TmuxSessionInfo

__all__ = ['TmuxGateway', 'TmuxSessionInfo']
