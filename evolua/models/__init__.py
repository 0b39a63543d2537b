from evolua.models.base import Base, TimestampMixin
from evolua.models.state_record import StateKey, StateRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "StateKey",
    "StateRecord",
]
