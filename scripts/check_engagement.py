import asyncio
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func, select

from baanboard.db.session import async_session_maker
from baanboard.models.post import Post
from baanboard.models.user import User
from baanboard.services.engagement_service import find_inconsistencies


async def check_engagement() -> int:
    async with async_session_maker() as db:
        total_posts = await db.scalar(select(func.count(Post.id)))
        total_users = await db.scalar(select(func.count(User.id)))
        print(f"Posts: {total_posts}, users: {total_users}")

        problems = await find_inconsistencies(db)
        if not problems:
            print("\nLikes, comments and post ownership are consistent.")
            return 0
        print(f"\n{len(problems)} inconsistencies found:")
        for line in problems:
            print(f"  - {line}")
        return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(check_engagement()))
