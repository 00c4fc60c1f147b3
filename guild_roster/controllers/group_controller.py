# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Group CRUD endpoints.
Thin HTTP layer — delegates ALL logic to GroupService / PartyService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from guild_roster.core.dependencies import get_account_id, get_group_service, get_party_service
from guild_roster.core.errors import RosterError
from guild_roster.models.domain import ACTIVITY_TYPE_PATTERN
from guild_roster.schemas.roster import GroupCreateRequest, GroupResponse, GroupUpdateRequest
from guild_roster.services.group_service import GroupService
from guild_roster.services.party_service import PartyService

router = APIRouter(prefix="/api/v1", tags=["Groups"])


@router.get("/groups", response_model=list[GroupResponse])
def list_groups(
    activity_type: Optional[str] = Query(default=None, pattern=ACTIVITY_TYPE_PATTERN),
    account_id: str = Depends(get_account_id),
    service: GroupService = Depends(get_group_service),
):
    """List the account's groups, optionally filtered by activity type."""
    return service.list_groups(account_id, activity_type)


@router.get("/groups/{group_id}")
def get_group(
    group_id: str,
    account_id: str = Depends(get_account_id),
    service: GroupService = Depends(get_group_service),
):
    """Group details including its parties and their members."""
    try:
        return service.get_group_with_parties(account_id, group_id)
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/groups/{group_id}/parties")
def list_group_parties(
    group_id: str,
    account_id: str = Depends(get_account_id),
    groups: GroupService = Depends(get_group_service),
    parties: PartyService = Depends(get_party_service),
):
    try:
        groups.get_group(account_id, group_id)
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return parties.list_parties(account_id, group_id=group_id)


@router.post("/groups", status_code=201, response_model=GroupResponse)
def create_group(
    payload: GroupCreateRequest,
    account_id: str = Depends(get_account_id),
    service: GroupService = Depends(get_group_service),
):
    """Create an empty group."""
    return service.create_group(
        account_id,
        name=payload.name,
        activity_type=payload.activity_type,
        description=payload.description,
    )


@router.put("/groups/{group_id}", response_model=GroupResponse)
def update_group(
    group_id: str,
    payload: GroupUpdateRequest,
    account_id: str = Depends(get_account_id),
    service: GroupService = Depends(get_group_service),
):
    try:
        return service.update_group(
            account_id,
            group_id,
            name=payload.name,
            activity_type=payload.activity_type,
            description=payload.description,
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/groups/{group_id}")
def delete_group(
    group_id: str,
    account_id: str = Depends(get_account_id),
    service: GroupService = Depends(get_group_service),
):
    """Delete a group together with every party it owns."""
    if not service.delete_group(account_id, group_id):
        raise HTTPException(status_code=404, detail=f"Group '{group_id}' not found")
    return {"status": "deleted", "group_id": group_id}
