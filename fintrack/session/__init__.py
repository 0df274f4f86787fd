"""Session package."""

from fintrack.session.state import SessionState, SessionStatus, SessionTicket

__all__ = ["SessionState", "SessionStatus", "SessionTicket"]
