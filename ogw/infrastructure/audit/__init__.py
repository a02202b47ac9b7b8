from ogw.infrastructure.audit.di import AuditInfraProvider

__all__ = ["AuditInfraProvider"]
