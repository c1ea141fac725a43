from workout_rotation.models.user import User
from workout_rotation.models.exercise import Exercise
from workout_rotation.models.tri_set import TriSet
from workout_rotation.models.workout import Workout
from workout_rotation.models.audit_log import AuditLog

__all__ = [
    "User",
    "Exercise",
    "TriSet",
    "Workout",
    "AuditLog",
]
