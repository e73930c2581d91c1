import asyncio
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from baanboard.core.errors import DuplicateEmailError
from baanboard.core.permissions import Role
from baanboard.db.session import async_session_maker
from baanboard.schemas.user import UserCreate
from baanboard.services.auth_service import register_user


async def create_admin(email, fullname, tel, password):
    async with async_session_maker() as session:
        data = UserCreate(fullname=fullname, email=email, tel=tel, password=password)
        try:
            user = await register_user(session, data, role=Role.ADMIN)
        except DuplicateEmailError:
            print(f"Error: User with email '{email}' already exists.")
            return
        await session.commit()
        print("Success: Admin created!")
        print(f"Id: {user.id}")
        print(f"Email: {user.email}")


if __name__ == "__main__":
    if len(sys.argv) < 5:
        print("Usage: python scripts/create_admin.py <email> <fullname> <tel> <password>")
        sys.exit(1)

    asyncio.run(create_admin(*sys.argv[1:5]))
