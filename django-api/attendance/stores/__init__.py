from attendance.stores.interfaces import (
    EventStore,
    ParticipationStore,
    PersonStore,
    Stores,
    UnitOfWork,
    VenueStore,
)
from attendance.stores.memory_store import MemoryDatabase, memory_stores

__all__ = [
    "EventStore",
    "ParticipationStore",
    "PersonStore",
    "Stores",
    "UnitOfWork",
    "VenueStore",
    "MemoryDatabase",
    "memory_stores",
]
