from app.services.assignment import AssignmentError, Infeasible, Matching, generate_assignments
from app.services.organizer import ValidationError
from app.services.reveal import InvalidKey, RecordExpired, RecordNotFound, RevealError
from app.services.store import StoreUnavailable

__all__ = [
    "AssignmentError",
    "Infeasible",
    "Matching",
    "generate_assignments",
    "ValidationError",
    "InvalidKey",
    "RecordExpired",
    "RecordNotFound",
    "RevealError",
    "StoreUnavailable",
]
