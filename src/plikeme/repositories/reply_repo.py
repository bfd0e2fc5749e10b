"""Data access helpers for working with thread replies."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from plikeme.models.reply import Reply

__all__ = ["ReplyRepository"]


class ReplyRepository:
    """Thin wrapper around database access for reply entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, reply_id: int) -> Reply | None:
        """Return a reply by identifier."""
        return self.session.execute(select(Reply).where(Reply.id == reply_id)).scalars().first()

    def get_in_thread(self, thread_id: int, reply_id: int) -> Reply | None:
        """Return a reply only if it belongs to the given thread."""
        stmt = select(Reply).where(Reply.id == reply_id, Reply.thread_id == thread_id)
        return self.session.execute(stmt).scalars().first()

    def list_for_thread(self, thread_id: int) -> list[Reply]:
        """Return every reply of a thread, oldest first."""
        stmt = (
            select(Reply)
            .where(Reply.thread_id == thread_id)
            .order_by(Reply.created_at.asc(), Reply.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def count_for_thread(self, thread_id: int) -> int:
        """Return the number of replies in a thread."""
        stmt = select(func.count()).select_from(Reply).where(Reply.thread_id == thread_id)
        return int(self.session.execute(stmt).scalar() or 0)

    def create(
        self,
        *,
        thread_id: int,
        user_id: int,
        content: str,
        parent_reply_id: int | None = None,
    ) -> Reply:
        """Insert a new reply and return the persisted ORM instance.

        Args:
            thread_id: Owning thread.
            user_id: Author of the reply.
            content: Reply body, already validated.
            parent_reply_id: Immediate parent reply, None for a top-level reply.
        """
        reply = Reply(
            thread_id=thread_id,
            user_id=user_id,
            content=content,
            parent_reply_id=parent_reply_id,
        )
        self.session.add(reply)
        self.session.flush()
        return reply

    def delete(self, reply: Reply) -> None:
        """Delete a single reply. Children keep their parent id."""
        self.session.delete(reply)
        self.session.flush()

    def delete_for_thread(self, thread_id: int) -> int:
        """Delete every reply of a thread and return how many were removed."""
        result = self.session.execute(delete(Reply).where(Reply.thread_id == thread_id))
        self.session.flush()
        return int(result.rowcount or 0)
