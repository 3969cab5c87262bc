"""
User service.

User registration with referral code support.
"""

import secrets
import string

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.config.settings import settings
from minefund.models.user import User
from minefund.repositories.user_repository import UserRepository
from minefund.services.base_service import BaseService, transaction
from minefund.services.referral.chain_manager import ReferralChainManager
from minefund.utils.exceptions import (
    ReferralCodeNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code(length: int | None = None) -> str:
    """Random referral code of uppercase letters and digits."""
    length = length or settings.referral_code_length
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


class UserService(BaseService):
    """User registration and lookup."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user service."""
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.chain_manager = ReferralChainManager(session, self.user_repo)

    async def get_user(self, user_id: int) -> User:
        """Get user or raise UserNotFoundError."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    @transaction
    async def register_user(
        self,
        email: str,
        full_name: str,
        referral_code: str | None = None,
    ) -> User:
        """
        Register a new user, optionally under a referrer.

        Args:
            email: Email address (unique)
            full_name: Display name
            referral_code: Referrer's code

        Returns:
            Created user

        Raises:
            UserAlreadyExistsError: If the email is taken
            ReferralCodeNotFoundError: If referral_code matches no user
        """
        email = email.strip().lower()
        if await self.user_repo.get_by_email(email):
            raise UserAlreadyExistsError(f"Email {email} is already registered")

        referrer = None
        if referral_code:
            referrer = await self.user_repo.get_by_referral_code(
                referral_code.strip().upper()
            )
            if referrer is None:
                raise ReferralCodeNotFoundError(
                    f"Referral code {referral_code} not found"
                )

        # Generate unique referral code
        while True:
            code = generate_referral_code()
            if not await self.user_repo.referral_code_exists(code):
                break

        user = await self.user_repo.create(
            email=email,
            full_name=full_name.strip(),
            referral_code=code,
        )

        if referrer is not None:
            await self.chain_manager.link_referrer(user.id, referrer.id)

        self.logger.info(
            "User registered",
            extra={
                "user_id": user.id,
                "has_referrer": referrer is not None,
            },
        )
        return user
