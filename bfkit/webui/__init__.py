from .app import DEFAULT_MAX_STEPS, MAX_MEM_SIZE, MAX_STEPS_CAP, create_app
from .session import SessionRecord, SessionStore

__all__ = [
    "DEFAULT_MAX_STEPS",
    "MAX_MEM_SIZE",
    "MAX_STEPS_CAP",
    "SessionRecord",
    "SessionStore",
    "create_app",
]
