"""User Store — SQLAlchemy implementation of UserRepository.

Invariants:
    - e-mail lookups are exact on the stored (lower-cased) address
    - create()/save() commit immediately: the user row survives later failures
      in the same request (e.g. mail delivery)
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.errors import ConflictError
from blog_api.models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SqlUserStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email)),
        )
        return result.scalar_one_or_none()

    async def create(self, **fields: object) -> User:
        user = User(**fields)
        user.email = normalize_email(user.email)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("An account with this email already exists")
        await self.db.refresh(user)
        return user

    async def save(self, user: User) -> None:
        self.db.add(user)
        await self.db.commit()
