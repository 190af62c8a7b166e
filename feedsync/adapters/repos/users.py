# feedsync/adapters/repos/users.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ...models import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> User | None:
        if not user_id:
            return None
        return await self.session.get(User, user_id)
