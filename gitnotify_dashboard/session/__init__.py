from .edit_session import (
    ConfigEditSession,
    SessionSnapshot,
    SessionState,
    SubmitOutcome,
)

__all__ = ["ConfigEditSession", "SessionSnapshot", "SessionState", "SubmitOutcome"]
