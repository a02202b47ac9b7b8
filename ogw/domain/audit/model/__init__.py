from .event import ANONYMOUS, AuditEvent

__all__ = ["ANONYMOUS", "AuditEvent"]
