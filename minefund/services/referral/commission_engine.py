"""
Referral commission engine.

Pays the referral chain above a beneficiary for one triggering event
(an approved deposit or a collected investment income). Deposit and
earning commissions share one walk; only the eligibility table differs.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.enums import CommissionStatus, CommissionType
from minefund.models.referral_commission import ReferralCommission
from minefund.repositories.admin_settings_repository import (
    AdminSettingsRepository,
)
from minefund.repositories.commission_repository import CommissionRepository
from minefund.repositories.user_repository import UserRepository
from minefund.services.ledger import BalanceLedger
from minefund.services.referral.chain_manager import ReferralChainManager
from minefund.services.referral.config import REFERRAL_DEPTH
from minefund.services.referral.rate_policy import CommissionRatePolicy
from minefund.utils.exceptions import (
    BeneficiaryNotFoundError,
    CommissionError,
    CommissionWalkError,
    DuplicateCommissionEventError,
    InvalidAmountError,
)
from minefund.utils.money import percent_of


@dataclass
class CommissionResult:
    """Result of one commission walk."""

    event_type: CommissionType
    source_id: int
    commissions: list[ReferralCommission] = field(default_factory=list)
    total_amount: Decimal = Decimal("0")

    @property
    def levels_paid(self) -> list[int]:
        """Levels that received a commission."""
        return [c.level for c in self.commissions]


class CommissionEngine:
    """
    Applies multi-level referral commissions.

    Collaborators default to the repository implementations bound to the
    session and can be replaced individually.
    """

    def __init__(
        self,
        session: AsyncSession,
        chain_manager: ReferralChainManager | None = None,
        ledger: BalanceLedger | None = None,
        commission_repo: CommissionRepository | None = None,
        settings_repo: AdminSettingsRepository | None = None,
        user_repo: UserRepository | None = None,
    ) -> None:
        """
        Initialize commission engine.

        Args:
            session: Async database session (caller owns the transaction)
        """
        self.session = session
        self.user_repo = user_repo or UserRepository(session)
        self.chain_manager = chain_manager or ReferralChainManager(
            session, self.user_repo
        )
        self.ledger = ledger or BalanceLedger(session)
        self.commission_repo = commission_repo or CommissionRepository(session)
        self.settings_repo = settings_repo or AdminSettingsRepository(session)

    async def load_policy(self) -> CommissionRatePolicy:
        """Snapshot the current rates from the settings row."""
        settings = await self.settings_repo.get_settings()
        return CommissionRatePolicy.from_settings(settings)

    async def apply_commissions(
        self,
        beneficiary_id: int,
        base_amount: Decimal,
        event_type: CommissionType | str,
        source_id: int,
        policy: CommissionRatePolicy | None = None,
    ) -> CommissionResult:
        """
        Pay commissions up the referral chain for one event.

        Every level of the walk is written inside one savepoint: either all
        eligible levels are paid and recorded, or none is. The method never
        commits.

        Args:
            beneficiary_id: User who made the deposit or collected income
            base_amount: Deposit amount or collected income
            event_type: deposit or earning
            source_id: Deposit ID or income collection ID
            policy: Rates to use; loaded from settings when omitted

        Returns:
            CommissionResult with the created records

        Raises:
            InvalidAmountError: If base_amount is not positive
            BeneficiaryNotFoundError: If the beneficiary does not exist
            RatePolicyUnavailableError: If rates cannot be loaded
            DuplicateCommissionEventError: If the event was already paid
            CommissionWalkError: If any level fails; nothing was applied
        """
        try:
            event = CommissionType(event_type)
        except ValueError as exc:
            raise CommissionError(f"Unknown commission event type: {event_type}") from exc

        if base_amount <= 0:
            raise InvalidAmountError(
                f"Commission base amount must be positive, got {base_amount}"
            )

        if not await self.user_repo.exists(id=beneficiary_id):
            raise BeneficiaryNotFoundError(f"User {beneficiary_id} not found")

        if policy is None:
            policy = await self.load_policy()

        if await self.commission_repo.exists_for_event(event.value, source_id):
            logger.warning(
                "Duplicate commission event refused",
                extra={"event_type": event.value, "source_id": source_id},
            )
            raise DuplicateCommissionEventError(event.value, source_id)

        result = CommissionResult(event_type=event, source_id=source_id)

        chain = await self.chain_manager.get_referral_chain(
            beneficiary_id, REFERRAL_DEPTH
        )
        if not chain:
            logger.debug(
                "No referrers for commission event",
                extra={
                    "beneficiary_id": beneficiary_id,
                    "event_type": event.value,
                    "source_id": source_id,
                },
            )
            return result

        current_level = 0
        try:
            async with self.session.begin_nested():
                for current_level, referrer_id in enumerate(chain, start=1):
                    rate = policy.rate_for(current_level, event)
                    if rate <= 0:
                        continue

                    amount = percent_of(base_amount, rate)
                    if amount <= 0:
                        continue

                    await self.ledger.increment(referrer_id, amount)
                    record = await self.commission_repo.create(
                        referred_user_id=beneficiary_id,
                        referrer_id=referrer_id,
                        level=current_level,
                        commission_type=event.value,
                        source_id=source_id,
                        base_amount=base_amount,
                        commission_percent=rate,
                        commission_amount=amount,
                        status=CommissionStatus.COMPLETED.value,
                    )
                    result.commissions.append(record)
                    result.total_amount += amount

                    logger.info(
                        "Referral commission paid",
                        extra={
                            "referrer_id": referrer_id,
                            "beneficiary_id": beneficiary_id,
                            "level": current_level,
                            "event_type": event.value,
                            "source_id": source_id,
                            "rate": str(rate),
                            "amount": str(amount),
                        },
                    )
        except Exception as exc:
            logger.error(
                "Commission walk failed, rolled back",
                extra={
                    "beneficiary_id": beneficiary_id,
                    "event_type": event.value,
                    "source_id": source_id,
                    "level": current_level,
                    "error": str(exc),
                },
            )
            raise CommissionWalkError(event.value, source_id, current_level) from exc

        logger.info(
            "Commission walk completed",
            extra={
                "beneficiary_id": beneficiary_id,
                "event_type": event.value,
                "source_id": source_id,
                "levels_paid": result.levels_paid,
                "total_amount": str(result.total_amount),
            },
        )
        return result
