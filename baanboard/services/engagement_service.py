"""Engagement coordinator: keeps post likes/comments and user reference lists in step.

Every operation here writes the post row first and the user row second, as two
separate commits. A failure between them leaves the pair out of step until
`find_inconsistencies` reports it; nothing is rolled back.
"""
import uuid
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.core.errors import NotFoundError, ValidationError
from baanboard.models.post import Post
from baanboard.models.user import User


def _log(msg: str, *args):
    print(f"[Engagement] {msg}", *args)


def _add_to_set(values: list | None, item: str) -> list:
    values = list(values or [])
    if item not in values:
        values.append(item)
    return values


def _pull(values: list | None, item: str) -> list:
    return [v for v in (values or []) if v != item]


def _locked(stmt):
    # Re-read under a row lock so concurrent writers see each other's array changes.
    return stmt.with_for_update().execution_options(populate_existing=True)


async def _get_post(db: AsyncSession, post_id: UUID) -> Post:
    result = await db.execute(_locked(select(Post).where(Post.id == post_id)))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError()
    return post


async def _get_user(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(_locked(select(User).where(User.id == user_id)))
    return result.scalar_one_or_none()


async def toggle_like(db: AsyncSession, post_id: UUID, user_id: UUID) -> int:
    """Like the post if the user hasn't, otherwise unlike it. Returns the new like count."""
    post = await _get_post(db, post_id)
    user_key, post_key = str(user_id), str(post_id)

    liked = user_key in (post.likes or [])
    if liked:
        post.likes = _pull(post.likes, user_key)
    else:
        post.likes = _add_to_set(post.likes, user_key)
    like_count = len(post.likes)
    await db.commit()

    user = await _get_user(db, user_id)
    if user is not None:
        if liked:
            user.liked_posts = _pull(user.liked_posts, post_key)
        else:
            user.liked_posts = _add_to_set(user.liked_posts, post_key)
        await db.commit()

    _log("unlike" if liked else "like", post_key, "by", user_key)
    return like_count


async def add_comment(db: AsyncSession, post_id: UUID, user_id: UUID, text: str) -> Post:
    if not text or not text.strip():
        raise ValidationError("Comment text is required")
    post = await _get_post(db, post_id)
    comment = {
        "id": str(uuid.uuid4()),
        "text": text,
        "owner": str(user_id),
        "created_at": datetime.utcnow().isoformat(),
    }
    # A user may comment any number of times.
    post.comments = [*(post.comments or []), comment]
    await db.commit()

    user = await _get_user(db, user_id)
    if user is not None:
        user.commented_posts = _add_to_set(user.commented_posts, str(post_id))
        await db.commit()

    _log("comment on", str(post_id), "by", str(user_id))
    return post


async def record_ownership(db: AsyncSession, post_id: UUID, owner_id: UUID) -> None:
    owner = await _get_user(db, owner_id)
    if owner is None:
        return
    owner.my_posts = _add_to_set(owner.my_posts, str(post_id))
    await db.commit()


async def release_ownership(db: AsyncSession, post_id: UUID, owner_id: UUID) -> None:
    owner = await _get_user(db, owner_id)
    if owner is None:
        return
    owner.my_posts = _pull(owner.my_posts, str(post_id))
    await db.commit()


async def release_engagement(db: AsyncSession, post_id: UUID, user_ids: Iterable[str]) -> None:
    """Drop a deleted post from the liked/commented lists of everyone who engaged with it."""
    ids = [UUID(u) for u in set(user_ids)]
    if not ids:
        return
    post_key = str(post_id)
    result = await db.execute(_locked(select(User).where(User.id.in_(ids)).order_by(User.id)))
    for user in result.scalars().all():
        user.liked_posts = _pull(user.liked_posts, post_key)
        user.commented_posts = _pull(user.commented_posts, post_key)
    await db.commit()


async def find_inconsistencies(db: AsyncSession) -> list[str]:
    """Audit both sides of every post/user reference. Returns one line per violation."""
    posts = {str(p.id): p for p in (await db.execute(select(Post))).scalars().all()}
    users = {str(u.id): u for u in (await db.execute(select(User))).scalars().all()}
    problems: list[str] = []

    for post_key, post in posts.items():
        owner = users.get(str(post.owner_id))
        if owner is None or post_key not in (owner.my_posts or []):
            problems.append(f"post {post_key} missing from myPosts of owner {post.owner_id}")
        for user_key in post.likes or []:
            user = users.get(user_key)
            if user is None or post_key not in (user.liked_posts or []):
                problems.append(f"post {post_key} liked by {user_key} but not in their likedPosts")
        for user_key in {c.get("owner") for c in post.comments or []}:
            user = users.get(user_key)
            if user is None or post_key not in (user.commented_posts or []):
                problems.append(f"post {post_key} commented by {user_key} but not in their commentedPosts")

    for user_key, user in users.items():
        for post_key in user.my_posts or []:
            post = posts.get(post_key)
            if post is None or str(post.owner_id) != user_key:
                problems.append(f"user {user_key} lists {post_key} in myPosts but does not own it")
        for post_key in user.liked_posts or []:
            post = posts.get(post_key)
            if post is None or user_key not in (post.likes or []):
                problems.append(f"user {user_key} lists {post_key} in likedPosts but the post has no such like")
        for post_key in user.commented_posts or []:
            if post_key not in posts:
                problems.append(f"user {user_key} lists deleted post {post_key} in commentedPosts")

    return problems
