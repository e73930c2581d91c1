import asyncio
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from baanboard.core.errors import NotFoundError, ValidationError
from baanboard.core.permissions import Identity, Role
from baanboard.db.base import Base
from baanboard.db.session import enable_sqlite_write_locks
from baanboard.models.post import Post
from baanboard.models.user import User
from baanboard.schemas.post import PostCreate
from baanboard.schemas.user import UserCreate
from baanboard.services import engagement_service, post_service
from baanboard.services.auth_service import register_user
from tests.conftest import auth, new_post, signup


async def _user(db, email: str) -> User:
    user = await register_user(db, UserCreate(fullname=email.split("@")[0], email=email, tel="0800000000", password="pw"))
    await db.commit()
    return user


async def _post(db, owner: User, title: str = "Hello") -> Post:
    return await post_service.create_post(db, owner.id, PostCreate(title=title, content="body", tag="Sport"))


class TestToggleLike:
    @pytest.mark.parametrize("times", [1, 2, 3, 4])
    async def test_toggle_is_its_own_inverse(self, db, times):
        owner = await _user(db, "owner@example.com")
        fan = await _user(db, "fan@example.com")
        post = await _post(db, owner)

        for _ in range(times):
            count = await engagement_service.toggle_like(db, post.id, fan.id)

        liked = times % 2 == 1
        assert (str(fan.id) in post.likes) is liked
        assert (str(post.id) in fan.liked_posts) is liked
        assert count == (1 if liked else 0)

    async def test_likes_from_different_users_accumulate(self, db):
        owner = await _user(db, "owner@example.com")
        fans = [await _user(db, f"fan{i}@example.com") for i in range(3)]
        post = await _post(db, owner)
        for fan in fans:
            count = await engagement_service.toggle_like(db, post.id, fan.id)
        assert count == 3
        assert len(set(post.likes)) == 3

    async def test_missing_post(self, db):
        fan = await _user(db, "fan@example.com")
        with pytest.raises(NotFoundError):
            await engagement_service.toggle_like(db, uuid4(), fan.id)


class TestAddComment:
    async def test_comments_append_but_reference_is_a_set(self, db):
        owner = await _user(db, "owner@example.com")
        fan = await _user(db, "fan@example.com")
        post = await _post(db, owner)

        for text in ("first", "second", "third"):
            await engagement_service.add_comment(db, post.id, fan.id, text)

        assert [c["text"] for c in post.comments] == ["first", "second", "third"]
        assert all(c["owner"] == str(fan.id) for c in post.comments)
        assert fan.commented_posts == [str(post.id)]

    async def test_blank_text_rejected(self, db):
        owner = await _user(db, "owner@example.com")
        post = await _post(db, owner)
        with pytest.raises(ValidationError):
            await engagement_service.add_comment(db, post.id, owner.id, "   ")
        assert post.comments == []

    async def test_missing_post(self, db):
        fan = await _user(db, "fan@example.com")
        with pytest.raises(NotFoundError):
            await engagement_service.add_comment(db, uuid4(), fan.id, "hi")


class TestOwnership:
    async def test_create_records_and_delete_releases(self, db):
        owner = await _user(db, "owner@example.com")
        fan = await _user(db, "fan@example.com")
        post = await _post(db, owner)
        post_id = post.id
        assert owner.my_posts == [str(post_id)]

        await engagement_service.toggle_like(db, post_id, fan.id)
        await engagement_service.add_comment(db, post_id, fan.id, "nice")
        await post_service.delete_post(db, post_id, Identity(id=owner.id, role=Role.USER))

        assert owner.my_posts == []
        assert fan.liked_posts == []
        assert fan.commented_posts == []
        assert await post_service.find_post(db, post_id) is None


class TestFindInconsistencies:
    async def test_clean_after_normal_traffic(self, db):
        owner = await _user(db, "owner@example.com")
        fan = await _user(db, "fan@example.com")
        post = await _post(db, owner)
        await engagement_service.toggle_like(db, post.id, fan.id)
        await engagement_service.add_comment(db, post.id, fan.id, "nice")
        assert await engagement_service.find_inconsistencies(db) == []

    async def test_reports_half_applied_like(self, db):
        owner = await _user(db, "owner@example.com")
        fan = await _user(db, "fan@example.com")
        post = await _post(db, owner)
        # Post side written, user side never reached.
        post.likes = [str(fan.id)]
        await db.commit()

        problems = await engagement_service.find_inconsistencies(db)
        assert len(problems) == 1
        assert str(fan.id) in problems[0]
        assert "likedPosts" in problems[0]

    async def test_reports_dangling_liked_post(self, db):
        fan = await _user(db, "fan@example.com")
        fan.liked_posts = [str(uuid4())]
        await db.commit()
        problems = await engagement_service.find_inconsistencies(db)
        assert len(problems) == 1


@pytest.fixture
async def file_session_maker(tmp_path):
    """Separate connections to one on-disk database, so sessions really run side by side."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'board.db'}")
    enable_sqlite_write_locks(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


class TestConcurrentEngagement:
    async def _seed(self, maker, fans: int, posts: int = 1):
        async with maker() as session:
            owner = await _user(session, "owner@example.com")
            fan_ids = [(await _user(session, f"fan{i}@example.com")).id for i in range(fans)]
            post_ids = [(await _post(session, owner, f"post {i}")).id for i in range(posts)]
        return post_ids, fan_ids

    async def test_likes_from_different_users_all_land(self, file_session_maker):
        (post_id,), fan_ids = await self._seed(file_session_maker, fans=4)

        async def like(fan_id):
            async with file_session_maker() as session:
                return await engagement_service.toggle_like(session, post_id, fan_id)

        counts = await asyncio.gather(*(like(f) for f in fan_ids))

        assert sorted(counts) == [1, 2, 3, 4]
        async with file_session_maker() as session:
            post = await session.get(Post, post_id)
            assert sorted(post.likes) == sorted(str(f) for f in fan_ids)
            assert await engagement_service.find_inconsistencies(session) == []

    async def test_comments_from_different_users_all_land(self, file_session_maker):
        (post_id,), fan_ids = await self._seed(file_session_maker, fans=4)

        async def comment(fan_id):
            async with file_session_maker() as session:
                await engagement_service.add_comment(session, post_id, fan_id, "same time")

        await asyncio.gather(*(comment(f) for f in fan_ids))

        async with file_session_maker() as session:
            post = await session.get(Post, post_id)
            assert sorted(c["owner"] for c in post.comments) == sorted(str(f) for f in fan_ids)
            assert await engagement_service.find_inconsistencies(session) == []

    async def test_one_user_liking_several_posts_at_once(self, file_session_maker):
        post_ids, (fan_id,) = await self._seed(file_session_maker, fans=1, posts=3)

        async def like(post_id):
            async with file_session_maker() as session:
                await engagement_service.toggle_like(session, post_id, fan_id)

        await asyncio.gather(*(like(p) for p in post_ids))

        async with file_session_maker() as session:
            fan = await session.get(User, fan_id)
            assert sorted(fan.liked_posts) == sorted(str(p) for p in post_ids)
            assert await engagement_service.find_inconsistencies(session) == []

    async def test_posts_created_at_once_are_all_owned(self, file_session_maker):
        _, (author_id,) = await self._seed(file_session_maker, fans=1, posts=0)

        async def create(i):
            async with file_session_maker() as session:
                data = PostCreate(title=f"burst {i}", content="body", tag="News")
                return (await post_service.create_post(session, author_id, data)).id

        post_ids = await asyncio.gather(*(create(i) for i in range(3)))

        async with file_session_maker() as session:
            author = await session.get(User, author_id)
            assert sorted(author.my_posts) == sorted(str(p) for p in post_ids)


class TestEngagementApi:
    async def test_like_toggle_endpoint(self, client):
        ann = await signup(client, "a@example.com")
        bob = await signup(client, "b@example.com")
        post = await new_post(client, ann)

        resp = await client.post(f"/post/{post['id']}/like", headers=auth(bob))
        assert resp.status_code == 200
        assert resp.json() == {"likeCount": 1}

        listed = (await client.get("/getpost", headers=auth(ann))).json()
        assert listed[0]["likeCount"] == 1
        bob_id = (await client.get("/my-profile", headers=auth(bob))).json()["id"]
        assert listed[0]["likes"] == [bob_id]

        resp = await client.post(f"/post/{post['id']}/like", headers=auth(bob))
        assert resp.json() == {"likeCount": 0}

    async def test_like_missing_post(self, client):
        ann = await signup(client, "a@example.com")
        resp = await client.post(f"/post/{uuid4()}/like", headers=auth(ann))
        assert resp.status_code == 404

    async def test_comment_endpoint(self, client):
        ann = await signup(client, "a@example.com")
        bob = await signup(client, "b@example.com", fullname="Bob")
        post = await new_post(client, ann)

        for text in ("one", "two"):
            resp = await client.post(f"/post/{post['id']}/comment", json={"text": text}, headers=auth(bob))
            assert resp.status_code == 201

        body = resp.json()
        assert [c["text"] for c in body["comments"]] == ["one", "two"]
        assert body["comments"][0]["owner"]["fullname"] == "Bob"

        profile = (await client.get("/my-profile", headers=auth(bob))).json()
        assert [p["id"] for p in profile["commentedPosts"]] == [post["id"]]

    async def test_comment_requires_text(self, client):
        ann = await signup(client, "a@example.com")
        post = await new_post(client, ann)
        resp = await client.post(f"/post/{post['id']}/comment", json={"text": ""}, headers=auth(ann))
        assert resp.status_code == 400

    async def test_comment_missing_post(self, client):
        ann = await signup(client, "a@example.com")
        resp = await client.post(f"/post/{uuid4()}/comment", json={"text": "hi"}, headers=auth(ann))
        assert resp.status_code == 404

    async def test_delete_drops_post_from_every_profile(self, client):
        ann = await signup(client, "a@example.com")
        bob = await signup(client, "b@example.com")
        post = await new_post(client, ann)
        await client.post(f"/post/{post['id']}/like", headers=auth(bob))
        await client.post(f"/post/{post['id']}/comment", json={"text": "hi"}, headers=auth(bob))

        assert (await client.delete(f"/deletepost/{post['id']}", headers=auth(ann))).status_code == 200
        profile = (await client.get("/my-profile", headers=auth(bob))).json()
        assert profile["likedPosts"] == []
        assert profile["commentedPosts"] == []
