"""Tests for UserService registration."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from minefund.services.user_service import (
    REFERRAL_CODE_ALPHABET,
    UserService,
    generate_referral_code,
)
from minefund.utils.exceptions import (
    ReferralCodeNotFoundError,
    UserAlreadyExistsError,
)


@pytest.fixture
def service(mock_session):
    service = UserService(mock_session)
    service.user_repo = AsyncMock()
    service.user_repo.get_by_email.return_value = None
    service.user_repo.referral_code_exists.return_value = False
    service.user_repo.create.side_effect = lambda **data: SimpleNamespace(
        id=10, **data
    )
    service.chain_manager = AsyncMock()
    return service


def test_generated_code_uses_alphabet():
    code = generate_referral_code(12)

    assert len(code) == 12
    assert set(code) <= set(REFERRAL_CODE_ALPHABET)


@pytest.mark.asyncio
async def test_register_without_referrer(service, mock_session):
    user = await service.register_user(" Ali@Example.com ", "Ali")

    assert user.email == "ali@example.com"
    assert len(user.referral_code) == 8
    service.chain_manager.link_referrer.assert_not_awaited()
    mock_session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_register_links_referrer(service):
    service.user_repo.get_by_referral_code.return_value = SimpleNamespace(id=3)

    await service.register_user("sara@example.com", "Sara", referral_code="abc123")

    service.user_repo.get_by_referral_code.assert_awaited_once_with("ABC123")
    service.chain_manager.link_referrer.assert_awaited_once_with(10, 3)


@pytest.mark.asyncio
async def test_unknown_referral_code(service, mock_session):
    service.user_repo.get_by_referral_code.return_value = None

    with pytest.raises(ReferralCodeNotFoundError):
        await service.register_user("sara@example.com", "Sara", referral_code="NOPE")

    service.user_repo.create.assert_not_awaited()
    mock_session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_duplicate_email(service):
    service.user_repo.get_by_email.return_value = SimpleNamespace(id=1)

    with pytest.raises(UserAlreadyExistsError):
        await service.register_user("ali@example.com", "Ali")


@pytest.mark.asyncio
async def test_regenerates_taken_code(service):
    service.user_repo.referral_code_exists.side_effect = [True, False]

    await service.register_user("ali@example.com", "Ali")

    assert service.user_repo.referral_code_exists.await_count == 2
