"""
Replies Infrastructure Repositories
===================================

SQLAlchemy and in-memory implementations of the replies collaborators.
"""

import json
from pathlib import Path
from typing import Iterable, List
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from supportdesk.core import RepositoryException
from supportdesk.replies.application import IDocumentStore, IReplyRecorder, ReplyResult
from supportdesk.replies.domain import Document
from supportdesk.replies.infrastructure.models import CompanyDataModel, ReplyRecordModel


def _to_document(model: CompanyDataModel) -> Document:
    return Document(
        id=model.id,
        name=model.name,
        content=model.content,
        description=model.description,
        type=model.type,
    )


class SQLAlchemyDocumentStore(IDocumentStore):
    """SQLAlchemy implementation for company knowledge."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_all(self) -> List[Document]:
        """Every company document, oldest first."""
        stmt = select(CompanyDataModel).order_by(CompanyDataModel.created_at)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [_to_document(model) for model in result.scalars().all()]
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to read company data: {e}")

    async def add(self, document: Document) -> None:
        """Insert one document (used by seeding scripts and tests)."""
        model = CompanyDataModel(
            id=document.id or str(uuid4()),
            name=document.name,
            description=document.description,
            content=document.content,
            type=document.type,
        )
        try:
            async with self._session_factory() as session:
                session.add(model)
                await session.commit()
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to store company data: {e}")


class SQLAlchemyReplyRecorder(IReplyRecorder):
    """SQLAlchemy implementation for reply history."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def record(self, ticket_id: str, reply: ReplyResult) -> None:
        """Store a reply for a ticket."""
        model = ReplyRecordModel(
            id=uuid4(),
            ticket_id=ticket_id,
            content=reply.reply_text,
            branch=reply.branch,
            source=reply.source,
            latency_ms=reply.latency_ms,
            created_at=reply.timestamp,
        )
        try:
            async with self._session_factory() as session:
                session.add(model)
                await session.commit()
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to record reply for ticket {ticket_id}: {e}")

    async def list_for_ticket(self, ticket_id: str) -> List[ReplyRecordModel]:
        stmt = (
            select(ReplyRecordModel)
            .where(ReplyRecordModel.ticket_id == ticket_id)
            .order_by(ReplyRecordModel.created_at)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to read replies for ticket {ticket_id}: {e}")


class InMemoryDocumentStore(IDocumentStore):
    """Fixed corpus held in memory, in the order given."""

    def __init__(self, documents: Iterable[Document] = ()):
        self._documents = list(documents)

    async def list_all(self) -> List[Document]:
        return list(self._documents)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDocumentStore":
        """
        Load a corpus from a JSON array of objects with ``name`` and
        ``content`` (``id``, ``description`` and ``type`` optional).
        """
        try:
            records = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryException(f"Failed to load corpus from {path}: {e}")

        documents = []
        for index, record in enumerate(records):
            try:
                documents.append(Document(
                    id=str(record.get("id", index)),
                    name=record["name"],
                    content=record["content"],
                    description=record.get("description"),
                    type=record.get("type", "documentation"),
                ))
            except (KeyError, AttributeError) as e:
                raise RepositoryException(f"Invalid corpus record #{index} in {path}: {e}")
        return cls(documents)
