"""Posts CRUD, likes and comments."""
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.api.deps import get_current_identity, get_db, parse_form
from baanboard.core.permissions import Identity
from baanboard.schemas.comment import CommentCreate
from baanboard.schemas.post import (
    LikeResponse,
    MessageResponse,
    PostCreate,
    PostFeedItem,
    PostResponse,
    PostUpdate,
    UserPostItem,
)
from baanboard.services import engagement_service, post_service

router = APIRouter(tags=["posts"])


@router.post("/post", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str | None = Form(None),
    content: str | None = Form(None),
    tag: str | None = Form(None),
    image: UploadFile | None = File(None),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    data = parse_form(PostCreate, title=title, content=content, tag=tag)
    post = await post_service.create_post(db, identity.id, data, image)
    authors = await post_service.load_comment_authors(db, [post])
    return post_service.post_to_response(post, authors)


@router.get("/getpost", response_model=list[PostFeedItem])
async def list_posts(
    search: str | None = Query(None),
    tag: str | None = Query(None),
    order_by: str | None = Query(None),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    posts = await post_service.list_posts(db, search=search, tag=tag, order_by=order_by)
    return await post_service.posts_to_response(db, posts)


@router.get("/mypost", response_model=list[PostFeedItem])
async def my_posts(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    posts = await post_service.list_posts_by_owner(db, identity.id)
    return await post_service.posts_to_response(db, posts)


@router.get("/user/{user_id}/posts", response_model=list[UserPostItem])
async def user_posts(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    posts = await post_service.list_posts_by_owner(db, user_id)
    return await post_service.posts_to_response(db, posts, UserPostItem)


@router.get("/post/{post_id}", response_model=PostFeedItem)
async def get_post(
    post_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post(db, post_id)
    [response] = await post_service.posts_to_response(db, [post])
    return response


@router.put("/post/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    title: str | None = Form(None),
    content: str | None = Form(None),
    tag: str | None = Form(None),
    image: UploadFile | None = File(None),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    data = parse_form(PostUpdate, title=title, content=content, tag=tag)
    post = await post_service.update_post(db, post_id, data, identity, image)
    authors = await post_service.load_comment_authors(db, [post])
    return post_service.post_to_response(post, authors)


@router.delete("/deletepost/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, post_id, identity)
    return MessageResponse(message="Deleted")


@router.post("/post/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    like_count = await engagement_service.toggle_like(db, post_id, identity.id)
    return LikeResponse(like_count=like_count)


@router.post("/post/{post_id}/comment", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: UUID,
    data: CommentCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    await engagement_service.add_comment(db, post_id, identity.id, data.text)
    post = await post_service.get_post(db, post_id)
    authors = await post_service.load_comment_authors(db, [post])
    return post_service.post_to_response(post, authors)
