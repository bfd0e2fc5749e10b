# src/plikeme/services/thread_links.py
"""Community links of threads and the community paths shown with them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import Select, and_, select
from sqlalchemy.orm import Session

from plikeme.models import Community, Thread, ThreadCommunity, User

from .community_filters import CommunitySelection
from .membership import display_path, membership_level, normalize_axis

__all__ = [
    "ANONYMOUS",
    "UNKNOWN_COMMUNITY",
    "community_paths",
    "link_selection",
    "replace_thread_links",
    "thread_ids_for_level",
    "thread_payloads",
]

UNKNOWN_COMMUNITY = "Unknown community"
ANONYMOUS = "Anonymous"


def link_selection(
    community_ids: Iterable[int],
    community_links: Iterable[Mapping[str, Any]],
) -> CommunitySelection:
    """Merge Level I ids and explicit links into one de-duplicated selection."""
    selection = CommunitySelection()
    for community_id in community_ids:
        selection.add(community_id)
    for link in community_links:
        selection.add(link["id"], link.get("stage"), link.get("type"))
    return selection


def replace_thread_links(db: Session, thread: Thread, selection: CommunitySelection) -> None:
    """Replace the thread's community links with the selected ones."""
    thread.community_links.clear()
    db.flush()
    for item in selection:
        thread.community_links.append(
            ThreadCommunity(community_id=item.community_id, stage=item.stage, type=item.type)
        )
    db.flush()


def community_paths(db: Session, links: Sequence[Any]) -> list[dict[str, Any]]:
    """Describe community levels with names and display paths.

    ``links`` are objects with ``community_id``, ``stage`` and ``type``
    (thread links or memberships). Identical levels are reported once.
    """
    ids = {link.community_id for link in links}
    names: dict[int, str] = {}
    if ids:
        rows = db.execute(select(Community.id, Community.name).where(Community.id.in_(ids)))
        names = {row.id: row.name for row in rows}

    seen: set[tuple[int, str, str]] = set()
    paths: list[dict[str, Any]] = []
    for link in links:
        key = (link.community_id, link.stage or "", link.type or "")
        if key in seen:
            continue
        seen.add(key)
        name = names.get(link.community_id, UNKNOWN_COMMUNITY)
        paths.append(
            {
                "id": link.community_id,
                "name": name,
                "stage": link.stage or None,
                "type": link.type or None,
                "display_path": display_path(name, link.stage, link.type),
            }
        )
    return paths


def thread_ids_for_level(
    community_id: int, stage: str | None, type_: str | None
) -> Select[tuple[int]]:
    """Return a select of thread ids visible at a community level.

    Level I sees every thread linked to the community. A stage-only level
    sees threads linked with that stage, whatever their type; type-only
    likewise. Level III sees exact matches only.
    """
    stage, type_ = normalize_axis(stage), normalize_axis(type_)
    condition = ThreadCommunity.community_id == community_id
    level = membership_level(stage, type_)
    if level == 3:
        condition = and_(condition, ThreadCommunity.stage == stage, ThreadCommunity.type == type_)
    elif stage:
        condition = and_(condition, ThreadCommunity.stage == stage)
    elif type_:
        condition = and_(condition, ThreadCommunity.type == type_)
    return select(ThreadCommunity.thread_id).where(condition).distinct()


def thread_payloads(
    db: Session,
    threads: Sequence[Thread],
    *,
    with_author: bool = False,
) -> list[dict[str, Any]]:
    """Serialize threads with their community paths and, optionally, author names."""
    authors: dict[int, str] = {}
    if with_author and threads:
        user_ids = {thread.user_id for thread in threads}
        rows = db.execute(select(User.id, User.username).where(User.id.in_(user_ids)))
        authors = {row.id: row.username for row in rows}

    payloads = []
    for thread in threads:
        payloads.append(
            {
                "id": thread.id,
                "user_id": thread.user_id,
                "title": thread.title,
                "content": thread.content,
                "created_at": thread.created_at,
                "community_ids": thread.community_ids,
                "communities": community_paths(db, thread.community_links),
                "author": authors.get(thread.user_id, ANONYMOUS) if with_author else None,
            }
        )
    return payloads
