# src/plikeme/api/v1/endpoints/gurus.py
"""Guru board endpoints: featured users and the public questions asked to them."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from plikeme.core.settings import settings
from plikeme.models import GuruQuestion, GuruQuestionReply, Thread, User
from plikeme.schemas.guru import (
    GuruDetail,
    GuruIntroUpdate,
    GuruReplyCard,
    GuruReplyCreate,
    GuruReplyCreated,
    GuruReplyResponse,
    GuruSummary,
    QuestionCreate,
    QuestionCreated,
    QuestionDetail,
    QuestionResponse,
)
from plikeme.services.reply_tree import build_cards, index_by_id, mention_for
from plikeme.services.thread_links import community_paths, thread_payloads
from plikeme.utils.sanitize import sanitize_input

from ..dependencies import CurrentUserDep, SessionDep, require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gurus", tags=["gurus"])

UNKNOWN_USER = "Unknown user"


def _usernames(db: Session, user_ids: set[int]) -> dict[int, str]:
    if not user_ids:
        return {}
    rows = db.execute(select(User.id, User.username).where(User.id.in_(user_ids)))
    return {row.id: row.username for row in rows}


def _get_guru_or_404(db: Session, username: str) -> User:
    guru = db.query(User).filter(User.username == username, User.is_guru.is_(True)).first()
    if guru is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guru not found",
        )
    return guru


def _get_question_or_404(db: Session, question_id: int) -> GuruQuestion:
    question = db.query(GuruQuestion).filter(GuruQuestion.id == question_id).first()
    if question is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found",
        )
    return question


def _summary(guru: User) -> dict[str, Any]:
    return {
        "id": guru.id,
        "username": guru.username,
        "created_at": guru.created_at,
        "guru_intro": guru.guru_intro,
        "disease_history": [{"disease": tag} for tag in guru.disease_tag_names],
    }


def _reply_counts(db: Session, question_ids: list[int]) -> dict[int, int]:
    if not question_ids:
        return {}
    rows = db.execute(
        select(GuruQuestionReply.question_id, func.count())
        .where(GuruQuestionReply.question_id.in_(question_ids))
        .group_by(GuruQuestionReply.question_id)
    )
    return {question_id: count for question_id, count in rows}


@router.get("/", response_model=list[GuruSummary])
async def list_gurus(db: SessionDep) -> list[dict[str, Any]]:
    """List every guru with their intro and disease history."""
    gurus = db.query(User).filter(User.is_guru.is_(True)).order_by(User.id).all()
    return [_summary(guru) for guru in gurus]


@router.put("/intro", status_code=status.HTTP_204_NO_CONTENT)
async def update_intro(
    payload: GuruIntroUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Update the caller's guru intro. Only gurus may do this."""
    if not current_user.is_guru:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only gurus can edit an intro",
        )
    intro = payload.intro or ""
    if len(intro) > settings.guru_intro_max:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Intro must be at most {settings.guru_intro_max} characters",
        )
    current_user.guru_intro = sanitize_input(intro)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/questions/{question_id}", response_model=QuestionDetail)
async def get_question(question_id: int, db: SessionDep) -> QuestionDetail:
    """Get a question with its replies, flat and grouped into cards."""
    question = _get_question_or_404(db, question_id)
    replies = (
        db.query(GuruQuestionReply)
        .filter(GuruQuestionReply.question_id == question.id)
        .order_by(GuruQuestionReply.created_at.asc(), GuruQuestionReply.id.asc())
        .all()
    )
    names = _usernames(
        db,
        {question.asker_user_id, question.guru_user_id} | {reply.user_id for reply in replies},
    )
    rendered = [
        GuruReplyResponse(
            id=reply.id,
            question_id=reply.question_id,
            user_id=reply.user_id,
            username=names.get(reply.user_id, UNKNOWN_USER),
            parent_reply_id=reply.parent_reply_id,
            content=reply.content,
            created_at=reply.created_at,
        )
        for reply in replies
    ]
    by_id = index_by_id(rendered)
    cards = [
        GuruReplyCard(
            top_reply=card.top_reply,
            stacked_replies=[
                reply.model_copy(
                    update={"mention": mention_for(reply, by_id, author_field="username")}
                )
                for reply in card.stacked_replies
            ],
        )
        for card in build_cards(rendered)
    ]
    return QuestionDetail(
        id=question.id,
        guru_user_id=question.guru_user_id,
        asker_user_id=question.asker_user_id,
        asker_username=names.get(question.asker_user_id, UNKNOWN_USER),
        guru_username=names.get(question.guru_user_id, UNKNOWN_USER),
        title=question.title,
        content=question.content,
        created_at=question.created_at,
        reply_count=len(rendered),
        replies=rendered,
        cards=cards,
    )


@router.delete("/questions/replies/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question_reply(
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete one of the caller's replies under a guru question."""
    reply = db.query(GuruQuestionReply).filter(GuruQuestionReply.id == reply_id).first()
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
    db.delete(reply)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete a question and its replies. Only the asker or the guru may."""
    question = _get_question_or_404(db, question_id)
    if current_user.id not in (question.asker_user_id, question.guru_user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this question",
        )
    db.execute(delete(GuruQuestionReply).where(GuruQuestionReply.question_id == question.id))
    db.delete(question)
    db.commit()
    logger.info("user %s deleted guru question %s", current_user.id, question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/questions/{question_id}/replies",
    status_code=status.HTTP_201_CREATED,
    response_model=GuruReplyCreated,
)
async def create_question_reply(
    question_id: int,
    payload: GuruReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> GuruReplyCreated:
    """Reply to a guru question, or to another reply under it.

    Raises:
        HTTPException: 404 for an unknown question; 400 for blank or oversized
            content, or a parent reply under a different question.
    """
    question = _get_question_or_404(db, question_id)
    require_text(payload.content, "Reply content", settings.guru_reply_content_max)

    if payload.parent_reply_id is not None:
        parent = (
            db.query(GuruQuestionReply)
            .filter(
                GuruQuestionReply.id == payload.parent_reply_id,
                GuruQuestionReply.question_id == question.id,
            )
            .first()
        )
        if parent is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parent reply not found under this question",
            )

    reply = GuruQuestionReply(
        question_id=question.id,
        user_id=current_user.id,
        parent_reply_id=payload.parent_reply_id,
        content=sanitize_input(payload.content),
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)
    logger.info("user %s replied to guru question %s", current_user.id, question.id)
    return GuruReplyCreated(id=reply.id)


@router.get("/{username}", response_model=GuruDetail)
async def get_guru(username: str, db: SessionDep) -> dict[str, Any]:
    """Get a guru with their communities and shared threads."""
    guru = _get_guru_or_404(db, username)
    threads = (
        db.query(Thread)
        .filter(Thread.user_id == guru.id)
        .order_by(Thread.created_at.desc(), Thread.id.desc())
        .all()
    )
    return {
        **_summary(guru),
        "communities": community_paths(db, guru.memberships),
        "threads": thread_payloads(db, threads, with_author=True),
    }


@router.get("/{username}/questions", response_model=list[QuestionResponse])
async def list_questions(username: str, db: SessionDep) -> list[dict[str, Any]]:
    """List the questions asked to a guru, newest first."""
    guru = _get_guru_or_404(db, username)
    questions = (
        db.query(GuruQuestion)
        .filter(GuruQuestion.guru_user_id == guru.id)
        .order_by(GuruQuestion.created_at.desc(), GuruQuestion.id.desc())
        .all()
    )
    names = _usernames(db, {q.asker_user_id for q in questions})
    counts = _reply_counts(db, [q.id for q in questions])
    return [
        {
            "id": q.id,
            "guru_user_id": q.guru_user_id,
            "asker_user_id": q.asker_user_id,
            "asker_username": names.get(q.asker_user_id, UNKNOWN_USER),
            "title": q.title,
            "content": q.content,
            "created_at": q.created_at,
            "reply_count": counts.get(q.id, 0),
        }
        for q in questions
    ]


@router.post(
    "/{username}/questions",
    status_code=status.HTTP_201_CREATED,
    response_model=QuestionCreated,
)
async def ask_question(
    username: str,
    payload: QuestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionCreated:
    """Ask a guru a public question.

    Raises:
        HTTPException: 404 for an unknown guru; 400 when asking yourself or
            for blank or oversized title or content.
    """
    guru = _get_guru_or_404(db, username)
    if guru.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot ask yourself a question",
        )
    require_text(payload.title, "Title", settings.guru_question_title_max)
    require_text(payload.content, "Content", settings.guru_question_content_max)

    question = GuruQuestion(
        guru_user_id=guru.id,
        asker_user_id=current_user.id,
        title=sanitize_input(payload.title),
        content=sanitize_input(payload.content),
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("user %s asked guru %s question %s", current_user.id, guru.id, question.id)
    return QuestionCreated(id=question.id)
