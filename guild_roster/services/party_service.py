# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Party registry — CRUD over fixed five-slot rosters.
Slot arrays supplied by callers follow the same uniqueness rules as the
assignment engine.
"""

from collections import Counter
from typing import Any, Optional

from guild_roster.core.errors import (
    ActivityTypeMismatchError,
    DuplicateSlotMemberError,
    FullError,
    InvalidSlotCountError,
    NotFoundError,
)
from guild_roster.core.logging import get_logger
from guild_roster.metrics.prometheus import PARTIES_CREATED
from guild_roster.models.domain import (
    EMPTY_SLOT,
    MAX_PARTIES_PER_GROUP,
    PARTY_SIZE,
    Party,
)
from guild_roster.models.snapshot import GROUPS, PARTIES, RosterSnapshot
from guild_roster.services.assignment_service import require_party
from guild_roster.services.sync import drop_assignments_to_party, sync_member_assignments
from guild_roster.services.unit_of_work import RosterUnitOfWork

logger = get_logger(__name__)


def check_slot_count(slots: Optional[list[int]]) -> None:
    if slots is not None and len(slots) > PARTY_SIZE:
        raise InvalidSlotCountError(
            f"A party has {PARTY_SIZE} slots, got {len(slots)}"
        )


def apply_slots(snapshot: RosterSnapshot, party: Party, slots: list[int]) -> None:
    """Replace a party's slots, evicting newcomers from sibling parties."""
    check_slot_count(slots)
    padded = list(slots) + [EMPTY_SLOT] * (PARTY_SIZE - len(slots))
    incoming = [m for m in padded if m != EMPTY_SLOT]

    duplicates = sorted(m for m, n in Counter(incoming).items() if n > 1)
    if duplicates:
        raise DuplicateSlotMemberError(f"Members {duplicates} appear in more than one slot")
    for member_id in incoming:
        if snapshot.member(member_id) is None:
            raise NotFoundError(f"Member {member_id} not found")

    former = party.occupants()
    for other in snapshot.parties_of_type(party.activity_type):
        if other.id == party.id:
            continue
        freed = [m for m in incoming if other.vacate(m) is not None]
        if freed:
            other.touch()

    party.slots = padded
    party.touch()
    snapshot.touch(PARTIES)
    sync_member_assignments(snapshot, party.activity_type, set(former) | set(incoming))


def discard_party(snapshot: RosterSnapshot, party: Party) -> list[int]:
    """Unlink a party from its group, drop it, and release its members."""
    if party.group_id:
        group = snapshot.group(party.group_id)
        if group is not None and party.id in group.party_ids:
            group.party_ids.remove(party.id)
            group.touch()
            snapshot.touch(GROUPS)
    former = party.occupants()
    snapshot.remove_parties([party.id])
    drop_assignments_to_party(snapshot, party.id)
    return former


def party_view(snapshot: RosterSnapshot, party: Party) -> dict[str, Any]:
    """Party record with occupied slots resolved to member records."""
    record = party.model_dump(mode="json")
    members = []
    for member_id in party.occupants():
        member = snapshot.member(member_id)
        if member is not None:
            members.append(member.model_dump(mode="json"))
    leader = snapshot.member(party.leader_id) if party.leader_id else None
    record["members"] = members
    record["leader"] = leader.model_dump(mode="json") if leader else None
    return record


class PartyService:
    """Business logic for party CRUD."""

    def __init__(self, uow: RosterUnitOfWork) -> None:
        self._uow = uow

    # ── Commands ──

    def create_party(
        self,
        account_id: str,
        name: str,
        activity_type: str,
        group_id: Optional[str] = None,
        slots: Optional[list[int]] = None,
    ) -> dict[str, Any]:
        check_slot_count(slots)
        with self._uow.session(account_id, "create_party") as snapshot:
            group = None
            if group_id is not None:
                group = snapshot.group(group_id)
                if group is None:
                    raise NotFoundError(f"Group '{group_id}' not found")
                if group.activity_type != activity_type:
                    raise ActivityTypeMismatchError(
                        f"Group '{group.name}' holds {group.activity_type} parties, "
                        f"not {activity_type}"
                    )
                if len(group.party_ids) >= MAX_PARTIES_PER_GROUP:
                    raise FullError(
                        f"Group '{group.name}' already holds {MAX_PARTIES_PER_GROUP} parties"
                    )

            party = Party(name=name, activity_type=activity_type, group_id=group_id)
            snapshot.parties.append(party)
            snapshot.touch(PARTIES)
            if slots:
                apply_slots(snapshot, party, slots)
            if group is not None:
                group.party_ids.append(party.id)
                group.touch()
                snapshot.touch(GROUPS)
            record = party_view(snapshot, party)

        PARTIES_CREATED.labels(activity_type=activity_type).inc()
        logger.info(
            "Party created: account=%s party=%s type=%s group=%s",
            account_id, party.id, activity_type, group_id,
        )
        return record

    def update_party(
        self,
        account_id: str,
        party_id: str,
        name: Optional[str] = None,
        slots: Optional[list[int]] = None,
    ) -> dict[str, Any]:
        check_slot_count(slots)
        with self._uow.session(account_id, "update_party") as snapshot:
            party = require_party(snapshot, party_id)
            if name:
                party.name = name
                party.touch()
                snapshot.touch(PARTIES)
            if slots is not None:
                apply_slots(snapshot, party, slots)
            record = party_view(snapshot, party)

        logger.info("Party updated: account=%s party=%s", account_id, party_id)
        return record

    def delete_party(self, account_id: str, party_id: str) -> bool:
        with self._uow.session(account_id, "delete_party") as snapshot:
            party = snapshot.party(party_id)
            if party is None:
                return False
            released = discard_party(snapshot, party)

        logger.info(
            "Party deleted: account=%s party=%s released=%s",
            account_id, party_id, released,
        )
        return True

    # ── Queries ──

    def get_party_with_members(self, account_id: str, party_id: str) -> dict[str, Any]:
        snapshot = self._uow.read(account_id)
        return party_view(snapshot, require_party(snapshot, party_id))

    def list_parties(
        self,
        account_id: str,
        activity_type: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        snapshot = self._uow.read(account_id)
        parties = snapshot.parties
        if activity_type:
            parties = [p for p in parties if p.activity_type == activity_type]
        if group_id:
            parties = [p for p in parties if p.group_id == group_id]
        return [party_view(snapshot, p) for p in parties]
