# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Whole-roster endpoints — default seed and consistency check.
"""

from fastapi import APIRouter, Depends

from guild_roster.core.dependencies import get_account_id, get_group_service, get_unit_of_work
from guild_roster.services.group_service import GroupService
from guild_roster.services.sync import find_invariant_violations
from guild_roster.services.unit_of_work import RosterUnitOfWork

router = APIRouter(prefix="/api/v1/roster", tags=["Roster"])


@router.post("/bootstrap")
def bootstrap_roster(
    account_id: str = Depends(get_account_id),
    service: GroupService = Depends(get_group_service),
):
    """Create the default groups and parties if the account has none."""
    return service.bootstrap_defaults(account_id)


@router.get("/verify")
def verify_roster(
    account_id: str = Depends(get_account_id),
    uow: RosterUnitOfWork = Depends(get_unit_of_work),
):
    """Report slot arrays and member back-references that disagree."""
    violations = find_invariant_violations(uow.read(account_id))
    return {"consistent": not violations, "violations": violations}
