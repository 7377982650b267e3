from app.db.models import Base, GroupRecord, Pairing
from app.db.session import SessionLocal, get_session, init_engine

__all__ = [
    "Base",
    "GroupRecord",
    "Pairing",
    "SessionLocal",
    "get_session",
    "init_engine",
]
