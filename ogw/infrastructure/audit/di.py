"""DI provider for the audit sink."""

from typing import AsyncIterable

from dishka import provide
from sqlalchemy.ext.asyncio import async_sessionmaker

from ogw.config import Config
from ogw.domain.audit.port.sink import AuditSink
from ogw.infrastructure.audit.database import (
    SQLAlchemyAuditSink,
    create_audit_engine,
    ensure_audit_schema,
)
from ogw.infrastructure.audit.sink import InMemoryAuditSink, LoggingAuditSink
from ogw.util.di.base import Provider
from ogw.util.di.scope import Scope


class AuditInfraProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_audit_sink(self, config: Config) -> AsyncIterable[AuditSink]:
        backend = config.audit.backend
        if backend == "memory":
            yield InMemoryAuditSink()
            return
        if backend == "logging":
            yield LoggingAuditSink()
            return

        engine = create_audit_engine(config.audit)
        await ensure_audit_schema(engine)
        try:
            yield SQLAlchemyAuditSink(async_sessionmaker(engine, expire_on_commit=False))
        finally:
            await engine.dispose()
