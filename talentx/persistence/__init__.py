"""Database persistence layer."""
from .database import (
    build_engine,
    create_read_session_factory,
    create_session_factory,
    get_session,
    init_db,
)
from .models import Application, Base, Invitation, Job, TalentProfile, User

__all__ = [
    "Base",
    "User",
    "TalentProfile",
    "Job",
    "Application",
    "Invitation",
    "build_engine",
    "create_session_factory",
    "create_read_session_factory",
    "init_db",
    "get_session",
]
