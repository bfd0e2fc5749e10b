# src/plikeme/services/reply_tree.py
"""Group a flat list of replies into rendering-ready cards.

A card is a top-level reply followed by every reply that descends from it,
at any depth, flattened into one chronological stack. The builder works on
anything exposing ``id``, ``parent_reply_id`` and ``created_at``, either as
attributes (ORM rows, pydantic models) or as mapping keys.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

__all__ = ["Card", "build_cards", "index_by_id", "mention_for", "resolve_root"]

R = TypeVar("R")


@dataclass
class Card(Generic[R]):
    """A top-level reply and its flattened descendants."""

    top_reply: R
    stacked_replies: list[R] = field(default_factory=list)

    def __iter__(self) -> Iterator[R]:
        yield self.top_reply
        yield from self.stacked_replies

    def __len__(self) -> int:
        return 1 + len(self.stacked_replies)


def _field(reply: Any, name: str) -> Any:
    if isinstance(reply, Mapping):
        return reply.get(name)
    return getattr(reply, name, None)


def index_by_id(replies: Sequence[R]) -> dict[Any, R]:
    """Map reply ids to replies. The first reply seen with an id wins."""
    by_id: dict[Any, R] = {}
    for reply in replies:
        by_id.setdefault(_field(reply, "id"), reply)
    return by_id


def resolve_root(reply: Any, by_id: Mapping[Any, Any]) -> Any:
    """Return the id of the reply that heads ``reply``'s card.

    The walk follows ``parent_reply_id`` upward and stops at a reply with no
    parent or with a parent absent from ``by_id``. It takes at most
    ``len(by_id)`` hops. A reply that sits on a cycle is its own root; a
    reply whose chain runs into a cycle resolves to the last reply before
    the cycle, the same way a chain ending at a missing parent does.
    """
    start_id = _field(reply, "id")
    path = {start_id: 0}
    current = reply
    for _ in range(len(by_id)):
        parent_id = _field(current, "parent_reply_id")
        if parent_id is None:
            return _field(current, "id")
        parent = by_id.get(parent_id)
        if parent is None:
            return _field(current, "id")
        if parent_id in path:
            entry = path[parent_id]
            return start_id if entry == 0 else list(path)[entry - 1]
        path[parent_id] = len(path)
        current = parent
    return start_id


def build_cards(replies: Sequence[R]) -> list[Card[R]]:
    """Partition replies into cards.

    Cards come out in the input order of their top reply. Inside a card the
    stacked replies are sorted by ``created_at``; equal timestamps keep their
    input order. Dangling parents and cycles never raise: the affected reply
    simply starts a card of its own.

    Args:
        replies: Every reply of one thread, in any order.

    Returns:
        One card per root reply. Empty input gives an empty list.
    """
    if not replies:
        return []

    by_id = index_by_id(replies)
    cards: list[Card[R]] = []
    card_for_root: dict[Any, Card[R]] = {}
    stacked_by_root: dict[Any, list[R]] = {}

    for reply in replies:
        reply_id = _field(reply, "id")
        root_id = resolve_root(reply, by_id)
        if root_id == reply_id:
            card = Card(top_reply=reply)
            cards.append(card)
            card_for_root.setdefault(reply_id, card)
        else:
            stacked_by_root.setdefault(root_id, []).append(reply)

    # Every resolved root resolves to itself, so its card exists.
    for root_id, stacked in stacked_by_root.items():
        card_for_root[root_id].stacked_replies = sorted(
            stacked,
            key=lambda item: _field(item, "created_at"),
        )

    return cards


def mention_for(reply: Any, by_id: Mapping[Any, Any], author_field: str = "author") -> str | None:
    """Return the author of ``reply``'s direct parent, if that parent is known."""
    parent_id = _field(reply, "parent_reply_id")
    if parent_id is None:
        return None
    parent = by_id.get(parent_id)
    if parent is None:
        return None
    author = _field(parent, author_field)
    return str(author) if author is not None else None
