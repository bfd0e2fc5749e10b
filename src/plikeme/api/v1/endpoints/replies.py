# src/plikeme/api/v1/endpoints/replies.py
"""Reply endpoints: flat reply lists, reply cards, create and delete."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from plikeme.core.settings import settings
from plikeme.models import Reply, Thread, User
from plikeme.repositories.reply_repo import ReplyRepository
from plikeme.schemas.reply import ReplyCard, ReplyCreate, ReplyListResponse, ReplyResponse
from plikeme.services.reply_tree import build_cards, index_by_id, mention_for
from plikeme.services.thread_links import ANONYMOUS

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep, require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/threads", tags=["replies"])


def _get_thread_or_404(db: Session, thread_id: int) -> Thread:
    thread = db.query(Thread).filter(Thread.id == thread_id).first()
    if thread is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thread not found",
        )
    return thread


def _usernames(db: Session, user_ids: set[int]) -> dict[int, str]:
    if not user_ids:
        return {}
    rows = db.execute(select(User.id, User.username).where(User.id.in_(user_ids)))
    return {row.id: row.username for row in rows}


def _render(
    replies: list[Reply],
    thread: Thread,
    viewer: User | None,
    usernames: dict[int, str],
) -> list[ReplyResponse]:
    """Attach author names and viewer flags to raw replies."""
    return [
        ReplyResponse(
            id=reply.id,
            thread_id=reply.thread_id,
            user_id=reply.user_id,
            parent_reply_id=reply.parent_reply_id,
            content=reply.content,
            created_at=reply.created_at,
            author=usernames.get(reply.user_id, ANONYMOUS),
            is_owner=viewer is not None and reply.user_id == viewer.id,
            is_thread_author=reply.user_id == thread.user_id,
        )
        for reply in replies
    ]


@router.get("/{thread_id}/replies", response_model=ReplyListResponse)
async def list_replies(
    thread_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> ReplyListResponse:
    """List a thread's replies, flat and grouped into cards.

    The flat list is oldest first. Each card holds a top-level reply and all
    of its descendants in chronological order; stacked replies carry the
    author of the reply they answer as ``mention``.

    Args:
        thread_id: Thread to read.
        db: Database session.
        viewer: Authenticated caller, if any; only used for ``is_owner``.

    Raises:
        HTTPException: 404 if the thread does not exist.
    """
    thread = _get_thread_or_404(db, thread_id)
    replies = ReplyRepository(db).list_for_thread(thread.id)
    rendered = _render(replies, thread, viewer, _usernames(db, {r.user_id for r in replies}))

    by_id = index_by_id(rendered)
    cards: list[ReplyCard] = []
    for card in build_cards(rendered):
        stacked = [
            reply.model_copy(update={"mention": mention_for(reply, by_id)})
            for reply in card.stacked_replies
        ]
        cards.append(ReplyCard(top_reply=card.top_reply, stacked_replies=stacked))

    return ReplyListResponse(replies=rendered, cards=cards, count=len(rendered))


@router.post(
    "/{thread_id}/replies",
    status_code=status.HTTP_201_CREATED,
    response_model=ReplyResponse,
)
async def create_reply(
    thread_id: int,
    payload: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyResponse:
    """Reply to a thread, or to another reply of the same thread.

    Raises:
        HTTPException: 404 for an unknown thread; 400 for blank or oversized
            content, or a parent reply that is not part of this thread.
    """
    thread = _get_thread_or_404(db, thread_id)
    content = require_text(payload.content, "Reply content", settings.reply_content_max)

    repo = ReplyRepository(db)
    parent: Reply | None = None
    if payload.parent_reply_id is not None:
        parent = repo.get_in_thread(thread.id, payload.parent_reply_id)
        if parent is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parent reply not found in this thread",
            )

    reply = repo.create(
        thread_id=thread.id,
        user_id=current_user.id,
        content=content,
        parent_reply_id=parent.id if parent else None,
    )
    db.commit()
    db.refresh(reply)
    logger.info(
        "user %s replied to thread %s (reply %s, parent %s)",
        current_user.id,
        thread.id,
        reply.id,
        reply.parent_reply_id,
    )

    mention = None
    if parent is not None:
        mention = _usernames(db, {parent.user_id}).get(parent.user_id, ANONYMOUS)
    rendered = _render([reply], thread, current_user, {current_user.id: current_user.username})[0]
    return rendered.model_copy(update={"mention": mention})


@router.delete("/{thread_id}/replies/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reply(
    thread_id: int,
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete one of the caller's replies. Replies answering it are kept."""
    repo = ReplyRepository(db)
    reply = repo.get_in_thread(thread_id, reply_id)
    if reply is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reply not found",
        )
    if reply.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this reply",
        )
    repo.delete(reply)
    db.commit()
    logger.info("user %s deleted reply %s in thread %s", current_user.id, reply_id, thread_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
