"""
Session Module - Black Box Interface

Purpose: Hold the values of one named session during a request
Interface: Session.get(), set(), delete(), add_flash(), flashes(), save()
Hidden: Dirty tracking, flash storage layout

Persistence is delegated to whichever store the session is bound to.
"""

from .session import FLASHES_KEY, Options, Session, new_session

__all__ = ["FLASHES_KEY", "Options", "Session", "new_session"]
