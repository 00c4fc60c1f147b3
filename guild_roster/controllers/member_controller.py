# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member directory endpoints.
Thin HTTP layer — delegates ALL logic to MemberService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from guild_roster.core.dependencies import get_account_id, get_member_service
from guild_roster.core.errors import RosterError
from guild_roster.models.domain import ACTIVITY_TYPE_PATTERN
from guild_roster.schemas.roster import MemberCreateRequest, MemberUpdateRequest
from guild_roster.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Members"])


@router.get("/members")
def list_members(
    account_id: str = Depends(get_account_id),
    service: MemberService = Depends(get_member_service),
):
    return service.list_members(account_id)


@router.get("/unassigned-members")
def unassigned_members(
    activity_type: Optional[str] = Query(default=None, pattern=ACTIVITY_TYPE_PATTERN),
    account_id: str = Depends(get_account_id),
    service: MemberService = Depends(get_member_service),
):
    """Members without a seat for the activity type (or without any seat)."""
    return service.unassigned_members(account_id, activity_type)


@router.get("/members/{member_id}")
def get_member(
    member_id: int,
    account_id: str = Depends(get_account_id),
    service: MemberService = Depends(get_member_service),
):
    try:
        return service.get_member(account_id, member_id)
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/members", status_code=201)
def create_member(
    payload: MemberCreateRequest,
    account_id: str = Depends(get_account_id),
    service: MemberService = Depends(get_member_service),
):
    try:
        return service.create_member(
            account_id,
            name=payload.name,
            member_id=payload.id,
            level=payload.level,
            character_class=payload.character_class,
            sort=payload.sort,
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/members/{member_id}")
def update_member(
    member_id: int,
    payload: MemberUpdateRequest,
    account_id: str = Depends(get_account_id),
    service: MemberService = Depends(get_member_service),
):
    """Update profile fields; party seats are managed by the assignment endpoints."""
    try:
        return service.update_member(
            account_id, member_id, payload.model_dump(exclude_unset=True)
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/members/{member_id}")
def delete_member(
    member_id: int,
    account_id: str = Depends(get_account_id),
    service: MemberService = Depends(get_member_service),
):
    try:
        return service.delete_member(account_id, member_id)
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
