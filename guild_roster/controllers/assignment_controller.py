# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member assignment endpoints (assign, remove, swap, clear).
Thin HTTP layer — delegates ALL logic to AssignmentService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from guild_roster.core.dependencies import get_account_id, get_assignment_service
from guild_roster.core.errors import RosterError
from guild_roster.models.domain import ACTIVITY_TYPE_PATTERN
from guild_roster.schemas.roster import (
    AssignMemberRequest,
    AssignmentResponse,
    RemoveMemberRequest,
    SwapMembersRequest,
)
from guild_roster.services.assignment_service import AssignmentService

router = APIRouter(prefix="/api/v1", tags=["Assignments"])


@router.post("/assign-member", response_model=AssignmentResponse)
def assign_member(
    payload: AssignMemberRequest,
    account_id: str = Depends(get_account_id),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Seat a member in a party slot; reports any member pushed out."""
    try:
        return service.assign_member(
            account_id,
            member_id=payload.member_id,
            party_id=payload.party_id,
            activity_type=payload.activity_type,
            slot_index=payload.slot_index,
            is_leader=payload.is_leader,
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/remove-member")
def remove_member(
    payload: RemoveMemberRequest,
    account_id: str = Depends(get_account_id),
    service: AssignmentService = Depends(get_assignment_service),
):
    try:
        return service.remove_member(
            account_id,
            member_id=payload.member_id,
            party_id=payload.party_id,
            activity_type=payload.activity_type,
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/swap-members")
def swap_members(
    payload: SwapMembersRequest,
    account_id: str = Depends(get_account_id),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Exchange the seats of two members of one activity type."""
    try:
        return service.swap_members(
            account_id,
            member1_id=payload.member1_id,
            member2_id=payload.member2_id,
            activity_type=payload.activity_type,
            declared_slot1=payload.member1_slot_index,
            declared_slot2=payload.member2_slot_index,
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/clear-all-parties")
def clear_all_parties(
    activity_type: Optional[str] = Query(default=None, pattern=ACTIVITY_TYPE_PATTERN),
    account_id: str = Depends(get_account_id),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Empty every party of one activity type, or of all types."""
    return service.clear_all(account_id, activity_type)
