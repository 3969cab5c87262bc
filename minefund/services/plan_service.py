"""
Plan service.

Admin management of investment plans.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.enums import PlanStatus
from minefund.models.plan import Plan
from minefund.repositories.plan_repository import PlanRepository
from minefund.schemas import PlanCreate, PlanUpdate
from minefund.services.base_service import BaseService, transaction
from minefund.utils.exceptions import PlanNotFoundError


class PlanService(BaseService):
    """Investment plan management."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize plan service."""
        super().__init__(session)
        self.plan_repo = PlanRepository(session)

    async def get_plan(self, plan_id: int) -> Plan:
        """Get plan or raise PlanNotFoundError."""
        plan = await self.plan_repo.get_by_id(plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        return plan

    async def list_plans(self, active_only: bool = False) -> list[Plan]:
        """List plans, cheapest first."""
        return await self.plan_repo.list_plans(active_only=active_only)

    @transaction
    async def create_plan(self, data: PlanCreate) -> Plan:
        """Create an active plan."""
        plan = await self.plan_repo.create(
            **data.model_dump(), status=PlanStatus.ACTIVE.value
        )
        self.logger.info(
            "Plan created",
            extra={"plan_id": plan.id, "plan_name": plan.name},
        )
        return plan

    @transaction
    async def update_plan(self, plan_id: int, data: PlanUpdate) -> Plan:
        """
        Apply a partial update.

        Existing investments keep the terms they were bought with.

        Raises:
            PlanNotFoundError: If the plan does not exist
            ValueError: If the result has max_investment below min_investment
        """
        plan = await self.plan_repo.get_for_update(plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        min_investment = changes.get("min_investment", plan.min_investment)
        max_investment = changes.get("max_investment", plan.max_investment)
        if max_investment is not None and max_investment < min_investment:
            raise ValueError("max_investment must be >= min_investment")

        for key, value in changes.items():
            setattr(plan, key, value)
        await self.session.flush()

        self.logger.info(
            "Plan updated",
            extra={"plan_id": plan_id, "fields": sorted(changes)},
        )
        return plan

    @transaction
    async def set_plan_status(
        self, plan_id: int, status: PlanStatus | str
    ) -> Plan:
        """Activate or deactivate a plan."""
        plan = await self.plan_repo.update(
            plan_id, for_update=True, status=PlanStatus(status).value
        )
        if plan is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")

        self.logger.info(
            "Plan status changed",
            extra={"plan_id": plan_id, "status": plan.status},
        )
        return plan
