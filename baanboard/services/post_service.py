"""Post store: create, list, edit and delete posts, plus response assembly."""
from collections.abc import Iterable
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import asc, desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from baanboard.core.errors import NotFoundError
from baanboard.core.permissions import Identity, ensure_can_mutate_post
from baanboard.models.post import Post
from baanboard.models.user import User
from baanboard.schemas.comment import CommentResponse
from baanboard.schemas.post import PostCreate, PostFeedItem, PostResponse, PostUpdate, UserPostItem
from baanboard.schemas.user import UserPublic
from baanboard.services.engagement_service import record_ownership, release_engagement, release_ownership
from baanboard.services.storage_service import save_image
from baanboard.workers.media import schedule_media_deletion

ORDER_BY_POST_DATE = "post_date"


def _log(msg: str, *args):
    print(f"[Posts] {msg}", *args)


def _with_owner(stmt):
    return stmt.options(selectinload(Post.owner)).execution_options(populate_existing=True)


async def find_post(db: AsyncSession, post_id: UUID) -> Post | None:
    result = await db.execute(_with_owner(select(Post).where(Post.id == post_id)))
    return result.scalar_one_or_none()


async def get_post(db: AsyncSession, post_id: UUID) -> Post:
    post = await find_post(db, post_id)
    if post is None:
        raise NotFoundError()
    return post


async def create_post(
    db: AsyncSession,
    owner_id: UUID,
    data: PostCreate,
    image_file: UploadFile | None = None,
) -> Post:
    image = await save_image(image_file, owner_id, "posts")
    post = Post(
        owner_id=owner_id,
        title=data.title,
        content=data.content,
        tag=data.tag,
        image=image,
        likes=[],
        comments=[],
    )
    db.add(post)
    await db.commit()
    await record_ownership(db, post.id, owner_id)
    _log("created", str(post.id), "by", str(owner_id))
    return await get_post(db, post.id)


async def list_posts(
    db: AsyncSession,
    search: str | None = None,
    tag: str | None = None,
    order_by: str | None = None,
) -> list[Post]:
    """Oldest first by default; `order_by=post_date` puts the newest first."""
    q = select(Post)
    if search:
        q = q.where(Post.title.icontains(search, autoescape=True))
    if tag:
        q = q.where(Post.tag == tag)
    if order_by == ORDER_BY_POST_DATE:
        q = q.order_by(desc(Post.created_at))
    else:
        q = q.order_by(asc(Post.created_at))
    result = await db.execute(_with_owner(q))
    return list(result.scalars().all())


async def list_posts_by_owner(db: AsyncSession, owner_id: UUID) -> list[Post]:
    q = select(Post).where(Post.owner_id == owner_id).order_by(desc(Post.created_at))
    result = await db.execute(_with_owner(q))
    return list(result.scalars().all())


async def get_posts_by_ids(db: AsyncSession, post_ids: Iterable[str]) -> dict[str, Post]:
    ids = [UUID(p) for p in set(post_ids)]
    if not ids:
        return {}
    result = await db.execute(_with_owner(select(Post).where(Post.id.in_(ids))))
    return {str(p.id): p for p in result.scalars().all()}


async def update_post(
    db: AsyncSession,
    post_id: UUID,
    data: PostUpdate,
    identity: Identity,
    image_file: UploadFile | None = None,
) -> Post:
    post = await find_post(db, post_id)
    ensure_can_mutate_post(identity, post)
    if data.title:
        post.title = data.title
    if data.content:
        post.content = data.content
    if data.tag:
        post.tag = data.tag
    image = await save_image(image_file, post.owner_id, "posts")
    replaced = None
    if image:
        replaced, post.image = post.image, image
    await db.commit()
    # Only drop the old upload once the row no longer points at it.
    schedule_media_deletion(replaced)
    return await get_post(db, post_id)


async def delete_post(db: AsyncSession, post_id: UUID, identity: Identity) -> None:
    post = await find_post(db, post_id)
    ensure_can_mutate_post(identity, post)
    owner_id = post.owner_id
    engaged = {*(post.likes or []), *(c.get("owner") for c in post.comments or [] if c.get("owner"))}
    image = post.image

    await db.delete(post)
    await db.commit()
    await release_ownership(db, post_id, owner_id)
    await release_engagement(db, post_id, engaged)
    schedule_media_deletion(image)
    _log("deleted", str(post_id), "by", str(identity.id))


async def load_comment_authors(db: AsyncSession, posts: Iterable[Post]) -> dict[str, User]:
    ids = {c["owner"] for p in posts for c in (p.comments or []) if c.get("owner")}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_([UUID(i) for i in ids])))
    return {str(u.id): u for u in result.scalars().all()}


def user_to_public(user: User | None) -> UserPublic | None:
    if user is None:
        return None
    return UserPublic(
        id=user.id,
        fullname=user.fullname,
        role=user.role,
        profile_image=user.profile_image,
    )


def post_to_response(
    post: Post,
    authors: dict[str, User],
    response_cls: type[PostResponse] = PostResponse,
) -> PostResponse:
    comments = post.comments or []
    fields = dict(
        id=post.id,
        title=post.title,
        content=post.content,
        tag=post.tag,
        image=post.image,
        owner=user_to_public(post.owner),
        likes=post.likes or [],
        comments=[
            CommentResponse(
                id=c["id"],
                text=c["text"],
                owner=user_to_public(authors.get(c.get("owner"))),
                created_at=c["created_at"],
            )
            for c in comments
        ],
        created_at=post.created_at,
    )
    if issubclass(response_cls, PostFeedItem):
        fields["like_count"] = len(post.likes or [])
    if issubclass(response_cls, UserPostItem):
        fields["comment_count"] = len(comments)
    return response_cls(**fields)


async def posts_to_response(
    db: AsyncSession,
    posts: list[Post],
    response_cls: type[PostResponse] = PostFeedItem,
) -> list[PostResponse]:
    authors = await load_comment_authors(db, posts)
    return [post_to_response(p, authors, response_cls) for p in posts]
