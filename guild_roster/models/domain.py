# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.

A party always has exactly PARTY_SIZE slots holding member ids, EMPTY_SLOT
marking a free seat. Slot 0 is the leader seat: leadership is read from it,
never stored separately.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

ACTIVITY_TYPES: tuple[str, ...] = ("kvm", "gvg")
ACTIVITY_TYPE_PATTERN = "^(kvm|gvg)$"

PARTY_SIZE = 5
MAX_PARTIES_PER_GROUP = 5
LEADER_SLOT = 0
EMPTY_SLOT = 0


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def empty_slots() -> list[int]:
    return [EMPTY_SLOT] * PARTY_SIZE


class PartyAssignment(BaseModel):
    """A member's seat for one activity type, derived from party slots."""
    party_id: str
    is_leader: bool = False


class Member(BaseModel):
    """A guild member and their per-activity-type party back-references."""
    id: int = Field(..., gt=0, description="Member id, 0 is reserved for empty slots")
    name: str = Field(..., min_length=1, max_length=255)
    level: Optional[int] = Field(default=None, ge=0)
    character_class: Optional[str] = Field(default=None, max_length=64)
    sort: Optional[int] = None
    created_at: str = Field(default_factory=utc_now)
    assignments: dict[str, PartyAssignment] = Field(default_factory=dict)


class Group(BaseModel):
    """A named collection of at most MAX_PARTIES_PER_GROUP parties."""
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=255)
    activity_type: str = Field(..., pattern=ACTIVITY_TYPE_PATTERN)
    description: Optional[str] = None
    party_ids: list[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)

    def touch(self) -> None:
        self.updated_at = utc_now()


class Party(BaseModel):
    """A fixed five-seat roster scoped to one activity type."""
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=255)
    activity_type: str = Field(..., pattern=ACTIVITY_TYPE_PATTERN)
    group_id: Optional[str] = None
    slots: list[int] = Field(default_factory=empty_slots)
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)

    @field_validator("slots")
    @classmethod
    def pad_slots(cls, v: list[int]) -> list[int]:
        if len(v) > PARTY_SIZE:
            raise ValueError(f"a party has at most {PARTY_SIZE} slots")
        if any(member_id < 0 for member_id in v):
            raise ValueError("slot values must be member ids or 0")
        return list(v) + [EMPTY_SLOT] * (PARTY_SIZE - len(v))

    @computed_field
    @property
    def leader_id(self) -> Optional[int]:
        leader = self.slots[LEADER_SLOT]
        return leader if leader != EMPTY_SLOT else None

    def slot_of(self, member_id: int) -> Optional[int]:
        for index, occupant in enumerate(self.slots):
            if occupant == member_id:
                return index
        return None

    def occupants(self) -> list[int]:
        return [m for m in self.slots if m != EMPTY_SLOT]

    def vacate(self, member_id: int) -> Optional[int]:
        """Empty every seat held by ``member_id``; return the first index freed."""
        freed: Optional[int] = None
        for index, occupant in enumerate(self.slots):
            if occupant == member_id:
                self.slots[index] = EMPTY_SLOT
                if freed is None:
                    freed = index
        return freed

    def clear(self) -> list[int]:
        """Empty the whole party and return the former occupants."""
        former = self.occupants()
        self.slots = empty_slots()
        return former

    def touch(self) -> None:
        self.updated_at = utc_now()
