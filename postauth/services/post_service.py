from __future__ import annotations

import logging
import uuid

from sqlalchemy import desc, select
from sqlalchemy.orm import Session, joinedload

from postauth.models.post import Post
from postauth.services.errors import PostNotFound, Unauthorized
from postauth.utils import clock
from postauth.utils.constants import POSTS_PER_PAGE

logger = logging.getLogger(__name__)


def _page_offset(page: int | None) -> int:
    if page is None or page <= 1:
        return 0
    return (page - 1) * POSTS_PER_PAGE


def _owned_post(db: Session, owner_id: uuid.UUID, post_id: uuid.UUID) -> Post:
    post = db.get(Post, post_id)
    if not post:
        raise PostNotFound()
    if post.user_id != owner_id:
        logger.info("account %s tried to modify post %s owned by %s", owner_id, post_id, post.user_id)
        raise Unauthorized()
    return post


def list_posts(db: Session, page: int | None = None) -> list[Post]:
    q = (
        select(Post)
        .options(joinedload(Post.owner))
        .order_by(desc(Post.created_at))
        .offset(_page_offset(page))
        .limit(POSTS_PER_PAGE)
    )
    return list(db.execute(q).scalars().all())


def get_post(db: Session, post_id: uuid.UUID) -> Post:
    post = db.execute(
        select(Post).options(joinedload(Post.owner)).where(Post.id == post_id)
    ).scalars().first()
    if not post:
        raise PostNotFound()
    return post


def create_post(db: Session, owner_id: uuid.UUID, title: str, description: str) -> Post:
    now = clock.utcnow()
    post = Post(
        title=title,
        description=description,
        user_id=owner_id,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def update_post(db: Session, owner_id: uuid.UUID, post_id: uuid.UUID, title: str, description: str) -> Post:
    post = _owned_post(db, owner_id, post_id)

    post.title = title
    post.description = description
    post.updated_at = clock.utcnow()

    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, owner_id: uuid.UUID, post_id: uuid.UUID) -> None:
    post = _owned_post(db, owner_id, post_id)
    db.delete(post)
    db.commit()
