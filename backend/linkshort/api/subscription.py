from fastapi import APIRouter, Depends

from ..core import policy
from ..core.security import AuthenticatedPrincipal, get_current_principal
from ..schemas.subscription import CurrentSubscription, PlanResponse

router = APIRouter(prefix="/subscription", tags=["subscription"])


def to_plan_response(plan: policy.Plan) -> PlanResponse:
    return PlanResponse(
        tier=plan.tier.value,
        name=plan.name,
        features=plan.features,
        custom_codes=plan.custom_codes,
        custom_domains=plan.custom_domains,
        full_analytics=plan.analytics.breakdowns and not plan.analytics.breakdown_limit,
        advanced_charts=plan.analytics.advanced_charts,
        pdf_download=plan.analytics.pdf_export,
    )


@router.get("/plans", response_model=list[PlanResponse])
async def list_plans():
    """Available plans, cheapest first"""
    return [to_plan_response(plan) for plan in policy.PLANS.values()]


@router.get("/current", response_model=CurrentSubscription)
async def current_subscription(
    principal: AuthenticatedPrincipal = Depends(get_current_principal)
):
    plan = policy.get_plan(principal.tier)
    return CurrentSubscription(tier=plan.tier.value, plan=to_plan_response(plan))
