# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import Optional

from pydantic import BaseModel, Field

from guild_roster.models.domain import ACTIVITY_TYPE_PATTERN


# ── Group Schemas ──

class GroupCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Group name")
    activity_type: str = Field(..., pattern=ACTIVITY_TYPE_PATTERN, description="kvm or gvg")
    description: Optional[str] = Field(default=None, max_length=1000)


class GroupUpdateRequest(BaseModel):
    """Partial update model for PUT /api/v1/groups/{id}."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    activity_type: Optional[str] = Field(default=None, pattern=ACTIVITY_TYPE_PATTERN)
    description: Optional[str] = Field(default=None, max_length=1000)


class GroupResponse(BaseModel):
    id: str
    name: str
    activity_type: str
    description: Optional[str] = None
    party_ids: list[str]
    created_at: str
    updated_at: str


# ── Party Schemas ──

class PartyCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Party name")
    activity_type: str = Field(..., pattern=ACTIVITY_TYPE_PATTERN)
    group_id: Optional[str] = None
    slots: Optional[list[int]] = Field(
        default=None, description="Member ids per slot, 0 for empty, at most 5"
    )


class PartyUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slots: Optional[list[int]] = None


class PartyResponse(BaseModel):
    id: str
    name: str
    activity_type: str
    group_id: Optional[str] = None
    slots: list[int]
    leader_id: Optional[int] = None
    members: list[dict]
    leader: Optional[dict] = None
    created_at: str
    updated_at: str


# ── Assignment Schemas ──

class AssignMemberRequest(BaseModel):
    member_id: int = Field(..., gt=0)
    party_id: str = Field(..., min_length=1)
    activity_type: Optional[str] = Field(default=None, pattern=ACTIVITY_TYPE_PATTERN)
    slot_index: Optional[int] = Field(default=None, description="Target slot 0-4")
    is_leader: bool = False


class RemoveMemberRequest(BaseModel):
    member_id: int = Field(..., gt=0)
    party_id: str = Field(..., min_length=1)
    activity_type: Optional[str] = Field(default=None, pattern=ACTIVITY_TYPE_PATTERN)


class SwapMembersRequest(BaseModel):
    member1_id: int = Field(..., gt=0)
    member2_id: int = Field(..., gt=0)
    activity_type: str = Field(..., pattern=ACTIVITY_TYPE_PATTERN)
    member1_slot_index: Optional[int] = Field(
        default=None, description="Slot the caller believes member 1 holds"
    )
    member2_slot_index: Optional[int] = None


class AssignmentResponse(BaseModel):
    member_id: int
    party_id: str
    activity_type: str
    slot_index: int
    is_leader: bool
    displaced_member_id: Optional[int] = None
    evicted_from: list[str]


# ── Member Schemas ──

class MemberCreateRequest(BaseModel):
    id: Optional[int] = Field(default=None, gt=0, description="Defaults to max id + 1")
    name: str = Field(..., min_length=1, max_length=255)
    level: Optional[int] = Field(default=None, ge=0)
    character_class: Optional[str] = Field(default=None, max_length=64)
    sort: Optional[int] = None


class MemberUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    level: Optional[int] = Field(default=None, ge=0)
    character_class: Optional[str] = Field(default=None, max_length=64)
    sort: Optional[int] = None
