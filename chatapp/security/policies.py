"""Row-level authorization predicates evaluated at the API boundary.

Every predicate is a plain function over identifiers and relationship facts so
it can be unit tested without a database. Services look the facts up, call the
predicate, and on failure call :func:`deny`, which records the denial on the
``chatapp.authz`` logger before raising a generic 403.
"""
from __future__ import annotations

import logging
from typing import Iterable, NoReturn
from uuid import UUID

from fastapi import HTTPException, status

authz_logger = logging.getLogger("chatapp.authz")

GENERIC_DENIAL_DETAIL = "You do not have permission to perform this action"


def deny(actor_id: UUID | None, action: str, target: object | None = None) -> NoReturn:
    """Log an authorization failure and raise a 403 with a generic detail."""

    authz_logger.warning("Denied %s for actor=%s target=%s", action, actor_id, target)
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=GENERIC_DENIAL_DETAIL)


def conceal(actor_id: UUID | None, action: str, target: object | None = None, *, detail: str = "Not found") -> NoReturn:
    """Log a denial for content whose existence must not leak and answer 404."""

    authz_logger.info("Concealed %s for actor=%s target=%s", action, actor_id, target)
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def is_owner(row_owner_id: UUID | None, actor_id: UUID) -> bool:
    """A row attributed to ``row_owner_id`` may be written only by that actor."""

    return row_owner_id is not None and row_owner_id == actor_id


def is_participant(participant_ids: Iterable[UUID], actor_id: UUID) -> bool:
    return actor_id in set(participant_ids)


def can_send_message(participant_ids: Iterable[UUID], actor_id: UUID) -> bool:
    """Messages are always stamped with the caller as sender, so only membership is checked."""

    return is_participant(participant_ids, actor_id)


def can_view_ephemeral(
    *,
    author_id: UUID,
    viewer_id: UUID,
    author_is_private: bool,
    viewer_follows_author: bool,
    viewer_is_close_friend: bool,
    close_friends_only: bool = False,
) -> bool:
    """Visibility of a story or note to ``viewer_id``.

    Own content is always visible. Otherwise the author must be public or
    followed by the viewer, and close-friends-only stories additionally need a
    close friend edge from the author to the viewer.
    """

    if author_id == viewer_id:
        return True
    if author_is_private and not viewer_follows_author:
        return False
    if close_friends_only and not viewer_is_close_friend:
        return False
    return True


def can_view_post(*, author_id: UUID, viewer_id: UUID, author_is_private: bool, viewer_follows_author: bool) -> bool:
    return can_view_ephemeral(
        author_id=author_id,
        viewer_id=viewer_id,
        author_is_private=author_is_private,
        viewer_follows_author=viewer_follows_author,
        viewer_is_close_friend=False,
    )


def can_write_storage_key(key: str, bucket: str, account_id: UUID) -> bool:
    """Storage keys are ``<bucket>/<account id>/...``; the owner segment must match the caller."""

    parts = key.split("/")
    if len(parts) < 3 or parts[0] != bucket:
        return False
    return parts[1] == str(account_id) and all(parts[2:])


__all__ = [
    "GENERIC_DENIAL_DETAIL",
    "authz_logger",
    "deny",
    "conceal",
    "is_owner",
    "is_participant",
    "can_send_message",
    "can_view_ephemeral",
    "can_view_post",
    "can_write_storage_key",
]
