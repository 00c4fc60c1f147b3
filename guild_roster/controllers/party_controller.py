# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Party CRUD endpoints.
Thin HTTP layer — delegates ALL logic to PartyService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from guild_roster.core.dependencies import get_account_id, get_party_service
from guild_roster.core.errors import RosterError
from guild_roster.models.domain import ACTIVITY_TYPE_PATTERN
from guild_roster.schemas.roster import PartyCreateRequest, PartyResponse, PartyUpdateRequest
from guild_roster.services.party_service import PartyService

router = APIRouter(prefix="/api/v1", tags=["Parties"])


@router.get("/parties", response_model=list[PartyResponse])
def list_parties(
    activity_type: Optional[str] = Query(default=None, pattern=ACTIVITY_TYPE_PATTERN),
    group_id: Optional[str] = None,
    account_id: str = Depends(get_account_id),
    service: PartyService = Depends(get_party_service),
):
    """List parties with their members resolved."""
    return service.list_parties(account_id, activity_type=activity_type, group_id=group_id)


@router.get("/parties/{party_id}", response_model=PartyResponse)
def get_party(
    party_id: str,
    account_id: str = Depends(get_account_id),
    service: PartyService = Depends(get_party_service),
):
    try:
        return service.get_party_with_members(account_id, party_id)
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/parties", status_code=201, response_model=PartyResponse)
def create_party(
    payload: PartyCreateRequest,
    account_id: str = Depends(get_account_id),
    service: PartyService = Depends(get_party_service),
):
    """Create a party, optionally inside a group and with initial slots."""
    try:
        return service.create_party(
            account_id,
            name=payload.name,
            activity_type=payload.activity_type,
            group_id=payload.group_id,
            slots=payload.slots,
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/parties/{party_id}", response_model=PartyResponse)
def update_party(
    party_id: str,
    payload: PartyUpdateRequest,
    account_id: str = Depends(get_account_id),
    service: PartyService = Depends(get_party_service),
):
    try:
        return service.update_party(
            account_id, party_id, name=payload.name, slots=payload.slots
        )
    except RosterError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/parties/{party_id}")
def delete_party(
    party_id: str,
    account_id: str = Depends(get_account_id),
    service: PartyService = Depends(get_party_service),
):
    """Delete a party and release its members."""
    if not service.delete_party(account_id, party_id):
        raise HTTPException(status_code=404, detail=f"Party '{party_id}' not found")
    return {"status": "deleted", "party_id": party_id}
