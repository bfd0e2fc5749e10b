# src/plikeme/api/v1/endpoints/threads.py
"""Thread endpoints for the P-LikeMe API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy.orm import Session

from plikeme.core.settings import settings
from plikeme.models import Thread, User
from plikeme.repositories.reply_repo import ReplyRepository
from plikeme.schemas.thread import (
    ThreadCreate,
    ThreadResponse,
    ThreadUpdate,
    UserThreadsResponse,
)
from plikeme.services.community_filters import CommunitySelection
from plikeme.services.thread_links import link_selection, replace_thread_links, thread_payloads

from ..dependencies import CurrentUserDep, SessionDep, require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/threads", tags=["threads"])


def _get_thread_or_404(db: Session, thread_id: int) -> Thread:
    thread = db.query(Thread).filter(Thread.id == thread_id).first()
    if thread is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thread not found",
        )
    return thread


def _get_owned_thread_or_404(db: Session, thread_id: int, user: User) -> Thread:
    thread = db.query(Thread).filter(Thread.id == thread_id, Thread.user_id == user.id).first()
    if thread is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thread not found or not owned by you",
        )
    return thread


def _validated(payload: ThreadCreate) -> tuple[str, str]:
    title = require_text(payload.title, "Title", settings.thread_title_max)
    content = require_text(payload.content, "Content", settings.thread_content_max)
    return title, content


def _selection(payload: ThreadCreate) -> CommunitySelection:
    return link_selection(
        payload.community_ids,
        [link.model_dump() for link in payload.community_links],
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=ThreadResponse)
async def create_thread(
    payload: ThreadCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Create a thread, optionally linked to communities.

    Args:
        payload: Title, content and community links.
        current_user: Authenticated author.
        db: Database session.

    Returns:
        The created thread with its community paths.

    Raises:
        HTTPException: 400 if the title or content is blank or too long.
    """
    title, content = _validated(payload)
    thread = Thread(user_id=current_user.id, title=title, content=content)
    db.add(thread)
    db.flush()
    replace_thread_links(db, thread, _selection(payload))
    db.commit()
    db.refresh(thread)
    logger.info("user %s created thread %s", current_user.id, thread.id)
    return thread_payloads(db, [thread])[0]


@router.get("/", response_model=list[ThreadResponse])
async def list_my_threads(current_user: CurrentUserDep, db: SessionDep) -> list[dict[str, Any]]:
    """List the caller's threads, newest first."""
    threads = (
        db.query(Thread)
        .filter(Thread.user_id == current_user.id)
        .order_by(Thread.created_at.desc(), Thread.id.desc())
        .all()
    )
    return thread_payloads(db, threads)


@router.get("/user/{username}", response_model=UserThreadsResponse)
async def list_user_threads(
    username: str,
    _current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """List another user's threads, newest first."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    threads = (
        db.query(Thread)
        .filter(Thread.user_id == user.id)
        .order_by(Thread.created_at.desc(), Thread.id.desc())
        .all()
    )
    return {
        "user": {"id": user.id, "username": user.username},
        "threads": thread_payloads(db, threads, with_author=True),
    }


@router.get("/{thread_id}", response_model=ThreadResponse)
async def get_my_thread(
    thread_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Get one of the caller's own threads."""
    thread = _get_thread_or_404(db, thread_id)
    if thread.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this thread",
        )
    return thread_payloads(db, [thread])[0]


@router.get("/{thread_id}/public", response_model=ThreadResponse)
async def get_public_thread(thread_id: int, db: SessionDep) -> dict[str, Any]:
    """Get any thread with its author and community paths."""
    thread = _get_thread_or_404(db, thread_id)
    payload = thread_payloads(db, [thread], with_author=True)[0]
    payload["reply_count"] = ReplyRepository(db).count_for_thread(thread.id)
    return payload


@router.put("/{thread_id}", response_model=ThreadResponse)
async def update_thread(
    thread_id: int,
    payload: ThreadUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Replace the title, content and community links of an owned thread."""
    thread = _get_owned_thread_or_404(db, thread_id, current_user)
    title, content = _validated(payload)
    thread.title = title
    thread.content = content
    replace_thread_links(db, thread, _selection(payload))
    db.commit()
    db.refresh(thread)
    return thread_payloads(db, [thread])[0]


@router.delete("/{thread_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_thread(
    thread_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete an owned thread with its community links and replies."""
    thread = _get_owned_thread_or_404(db, thread_id, current_user)
    removed = ReplyRepository(db).delete_for_thread(thread.id)
    db.delete(thread)
    db.commit()
    logger.info("user %s deleted thread %s (%s replies)", current_user.id, thread_id, removed)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
