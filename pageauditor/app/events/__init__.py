from .emitter import AuditEventEmitter, NullEventEmitter
from .memory_emitter import MemoryQueueEventEmitter
from .models import AuditEvent, AuditEventType

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditEventEmitter",
    "MemoryQueueEventEmitter",
    "NullEventEmitter",
]
