"""SQLAlchemy audit sink: append-only `audit_events` table."""

import logging

from sqlalchemy import Column, DateTime, Index, MetaData, String, Table, insert
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.types import JSON

from ogw.config import AuditConfig
from ogw.domain.audit.model.event import AuditEvent
from ogw.domain.audit.port.sink import AuditSink

logger = logging.getLogger(__name__)

metadata = MetaData()

# Append-only; rows are never updated or deleted
audit_events_table = Table(
    "audit_events",
    metadata,
    Column("id", String, primary_key=True),
    Column("timestamp", DateTime(timezone=True), nullable=False),
    Column("actor", String, nullable=False),
    Column("action", String(128), nullable=False),
    Column("payload", JSON, nullable=False),
)

Index("idx_audit_events_actor", audit_events_table.c.actor)
Index("idx_audit_events_timestamp", audit_events_table.c.timestamp)


def create_audit_engine(config: AuditConfig) -> AsyncEngine:
    return create_async_engine(config.database_url, echo=config.echo)


async def ensure_audit_schema(engine: AsyncEngine) -> None:
    """Create the audit table if it does not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.debug("Audit schema ensured: url=%s", engine.url)


class SQLAlchemyAuditSink(AuditSink):
    """Each event is written in its own short transaction.

    Audit writes are independent of the request's unit of work, so an
    interaction that later fails still leaves its audit trail behind.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record(self, event: AuditEvent) -> None:
        async with self._session_factory() as session:
            await session.execute(
                insert(audit_events_table).values(
                    id=str(event.id),
                    timestamp=event.timestamp,
                    actor=event.actor,
                    action=event.action,
                    payload=event.model_dump(mode="json")["payload"],
                )
            )
            await session.commit()
