"""UserDAO — users table operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from boathub.dao.base import BaseDAO
from boathub.models.user import User


class UserDAO(BaseDAO[User]):
    model = User

    async def get_by_username(self, session: AsyncSession, username: str) -> User | None:
        """Look up a user by username (login flow)."""
        return await self.get_by_field(session, username=username)

    async def create_if_absent(
        self,
        session: AsyncSession,
        *,
        username: str,
        password_hash: str,
        enabled: bool = True,
    ) -> tuple[User, bool]:
        """Insert a user unless the username is already taken.

        Used at startup to provision seed accounts. Returns ``(user, created)``;
        an existing row is returned unchanged.
        """
        existing = await self.get_by_username(session, username)
        if existing is not None:
            return existing, False
        user = await self.create(
            session,
            username=username,
            password_hash=password_hash,
            enabled=enabled,
        )
        return user, True
