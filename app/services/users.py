from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import UNIQUE_VIOLATION, integrity_kind
from app.models import User
import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class Identity:
    """Verified caller as resolved by the identity provider"""

    user_id: str
    name: str | None = None
    image: str | None = None


class UserService:
    """Mirrors identities from the provider into the users table"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def sync_identity(self, identity: Identity) -> User:
        """Insert the user on first sight, refresh name/image when they change"""
        user = await self.db.get(User, identity.user_id)
        if user is None:
            user = User(id=identity.user_id, name=identity.name, image=identity.image)
            self.db.add(user)
            try:
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                if integrity_kind(e) != UNIQUE_VIOLATION:
                    raise
                # Another request inserted the same user first
                user = await self.db.get(User, identity.user_id, populate_existing=True)
                if user is None:
                    raise
            else:
                logger.info("user_registered", user_id=identity.user_id)
                return user

        if (user.name, user.image) != (identity.name, identity.image):
            user.name = identity.name
            user.image = identity.image
            await self.db.commit()
            logger.info("user_profile_refreshed", user_id=identity.user_id)
        return user
