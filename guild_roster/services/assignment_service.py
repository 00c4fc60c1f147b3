# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Assignment engine — places, removes and swaps members across party slots.

Rules enforced on every call:
  * a member holds at most one slot per activity type (placing evicts copies);
  * slot 0 is the leader seat, leadership is never tracked apart from it;
  * every member whose seat changed gets its ``assignments`` entry rewritten
    from the slot arrays before the snapshot is committed.
"""

from typing import Any, Optional

from guild_roster.core.errors import (
    ActivityTypeMismatchError,
    FullError,
    InvalidSlotIndexError,
    NotFoundError,
    PositionMismatchError,
)
from guild_roster.core.logging import get_logger
from guild_roster.metrics.prometheus import (
    ASSIGNMENTS_TOTAL,
    CLEARS_TOTAL,
    DISPLACEMENTS_TOTAL,
    REMOVALS_TOTAL,
    SWAPS_TOTAL,
)
from guild_roster.models.domain import ACTIVITY_TYPES, EMPTY_SLOT, LEADER_SLOT, PARTY_SIZE, Party
from guild_roster.models.snapshot import MEMBERS, PARTIES, RosterSnapshot
from guild_roster.services.sync import sync_member_assignments
from guild_roster.services.unit_of_work import RosterUnitOfWork

logger = get_logger(__name__)


def require_party(
    snapshot: RosterSnapshot, party_id: str, activity_type: Optional[str] = None
) -> Party:
    party = snapshot.party(party_id)
    if party is None:
        raise NotFoundError(f"Party '{party_id}' not found")
    if activity_type is not None and party.activity_type != activity_type:
        raise ActivityTypeMismatchError(
            f"Party '{party_id}' is a {party.activity_type} party, not {activity_type}"
        )
    return party


def resolve_target_slot(
    party: Party,
    member_id: int,
    slot_index: Optional[int],
    is_leader: bool,
) -> int:
    """Pick the seat an assignment lands in. Pure function."""
    if slot_index is not None:
        if not 0 <= slot_index < PARTY_SIZE:
            raise InvalidSlotIndexError(
                f"Slot index {slot_index} is outside 0..{PARTY_SIZE - 1}"
            )
        if is_leader and slot_index != LEADER_SLOT:
            raise InvalidSlotIndexError(
                f"A leader must sit in slot {LEADER_SLOT}, not {slot_index}"
            )
        return slot_index

    if is_leader:
        return LEADER_SLOT

    # a re-assigned leader drops to a member slot
    current = party.slot_of(member_id)
    if current is not None and current != LEADER_SLOT:
        return current

    for index in range(LEADER_SLOT + 1, PARTY_SIZE):
        if party.slots[index] == EMPTY_SLOT:
            return index
    raise FullError(f"Party '{party.name}' has no free member slot")


class AssignmentService:
    """Business logic for moving members between party slots."""

    def __init__(self, uow: RosterUnitOfWork, strict_swap_positions: bool = False) -> None:
        self._uow = uow
        self._strict_swap_positions = strict_swap_positions

    # ── Commands ──

    def assign_member(
        self,
        account_id: str,
        member_id: int,
        party_id: str,
        activity_type: Optional[str] = None,
        slot_index: Optional[int] = None,
        is_leader: bool = False,
    ) -> dict[str, Any]:
        """Seat a member in a party. Displacing the current occupant is allowed."""
        with self._uow.session(account_id, "assign") as snapshot:
            party = require_party(snapshot, party_id, activity_type)
            if snapshot.member(member_id) is None:
                raise NotFoundError(f"Member {member_id} not found")
            kind = party.activity_type

            evicted_from: list[str] = []
            for other in snapshot.parties_of_type(kind):
                if other.id != party.id and other.vacate(member_id) is not None:
                    other.touch()
                    evicted_from.append(other.id)

            target = resolve_target_slot(party, member_id, slot_index, is_leader)

            previous = party.slot_of(member_id)
            if previous is not None and previous != target:
                party.vacate(member_id)

            occupant = party.slots[target]
            displaced_member_id = (
                occupant if occupant not in (EMPTY_SLOT, member_id) else None
            )

            party.slots[target] = member_id
            party.touch()
            snapshot.touch(PARTIES)

            affected = [member_id]
            if displaced_member_id is not None:
                affected.append(displaced_member_id)
            sync_member_assignments(snapshot, kind, affected)

        ASSIGNMENTS_TOTAL.labels(activity_type=kind).inc()
        if displaced_member_id is not None:
            DISPLACEMENTS_TOTAL.labels(activity_type=kind).inc()
            logger.warning(
                "Member displaced: account=%s party=%s slot=%d displaced=%s by=%s",
                account_id, party_id, target, displaced_member_id, member_id,
            )
        logger.info(
            "Member assigned: account=%s member=%s party=%s slot=%d evicted_from=%s",
            account_id, member_id, party_id, target, evicted_from,
        )
        return {
            "member_id": member_id,
            "party_id": party_id,
            "activity_type": kind,
            "slot_index": target,
            "is_leader": target == LEADER_SLOT,
            "displaced_member_id": displaced_member_id,
            "evicted_from": evicted_from,
        }

    def remove_member(
        self,
        account_id: str,
        member_id: int,
        party_id: str,
        activity_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """Free a member's seat in a party. Raises NotFoundError if not seated there."""
        with self._uow.session(account_id, "remove") as snapshot:
            party = require_party(snapshot, party_id, activity_type)
            slot = party.slot_of(member_id)
            if slot is None:
                raise NotFoundError(
                    f"Member {member_id} does not occupy party '{party_id}'"
                )
            party.vacate(member_id)
            party.touch()
            snapshot.touch(PARTIES)
            sync_member_assignments(snapshot, party.activity_type, [member_id])
            kind = party.activity_type

        REMOVALS_TOTAL.labels(activity_type=kind).inc()
        logger.info(
            "Member removed: account=%s member=%s party=%s slot=%d",
            account_id, member_id, party_id, slot,
        )
        return {
            "member_id": member_id,
            "party_id": party_id,
            "activity_type": kind,
            "slot_index": slot,
            "was_leader": slot == LEADER_SLOT,
        }

    def swap_members(
        self,
        account_id: str,
        member1_id: int,
        member2_id: int,
        activity_type: str,
        declared_slot1: Optional[int] = None,
        declared_slot2: Optional[int] = None,
    ) -> dict[str, Any]:
        """Exchange the seats of two members of the same activity type.

        Positions are looked up in the freshly loaded roster, so declared
        slots are advisory: a mismatch is logged and the actual seats are
        swapped. With ``strict_swap_positions`` a mismatch raises
        PositionMismatchError instead.
        """
        with self._uow.session(account_id, "swap") as snapshot:
            first = snapshot.locate(member1_id, activity_type)
            if first is None:
                raise NotFoundError(f"Member {member1_id} holds no {activity_type} slot")
            second = snapshot.locate(member2_id, activity_type)
            if second is None:
                raise NotFoundError(f"Member {member2_id} holds no {activity_type} slot")

            party1, slot1 = first
            party2, slot2 = second
            self._check_declared(account_id, member1_id, declared_slot1, slot1)
            self._check_declared(account_id, member2_id, declared_slot2, slot2)

            if member1_id != member2_id:
                party1.slots[slot1] = member2_id
                party2.slots[slot2] = member1_id
                party1.touch()
                party2.touch()
                snapshot.touch(PARTIES)
                sync_member_assignments(snapshot, activity_type, [member1_id, member2_id])

        SWAPS_TOTAL.labels(activity_type=activity_type).inc()
        logger.info(
            "Members swapped: account=%s %s@%s[%d] <-> %s@%s[%d]",
            account_id, member1_id, party1.id, slot1, member2_id, party2.id, slot2,
        )
        return {
            "activity_type": activity_type,
            "member1": {
                "member_id": member1_id,
                "party_id": party2.id,
                "slot_index": slot2,
                "is_leader": slot2 == LEADER_SLOT,
            },
            "member2": {
                "member_id": member2_id,
                "party_id": party1.id,
                "slot_index": slot1,
                "is_leader": slot1 == LEADER_SLOT,
            },
        }

    def clear_all(self, account_id: str, activity_type: Optional[str] = None) -> dict[str, Any]:
        """Empty every party of a type (all types when omitted)."""
        kinds = (activity_type,) if activity_type else ACTIVITY_TYPES
        parties_cleared = 0
        slots_freed = 0
        members_released = 0

        with self._uow.session(account_id, "clear_all") as snapshot:
            for kind in kinds:
                for party in snapshot.parties_of_type(kind):
                    former = party.clear()
                    if former:
                        party.touch()
                        parties_cleared += 1
                        slots_freed += len(former)
                for member in snapshot.members:
                    if member.assignments.pop(kind, None) is not None:
                        members_released += 1
            snapshot.touch(PARTIES, MEMBERS)

        CLEARS_TOTAL.inc()
        logger.info(
            "Rosters cleared: account=%s types=%s parties=%d slots=%d",
            account_id, list(kinds), parties_cleared, slots_freed,
        )
        return {
            "activity_types": list(kinds),
            "parties_cleared": parties_cleared,
            "slots_freed": slots_freed,
            "members_released": members_released,
        }

    # ── Helpers ──

    def _check_declared(
        self, account_id: str, member_id: int, declared: Optional[int], actual: int
    ) -> None:
        if declared is None or declared == actual:
            return
        if self._strict_swap_positions:
            raise PositionMismatchError(
                f"Member {member_id} sits in slot {actual}, not {declared}"
            )
        logger.warning(
            "Stale swap position ignored: account=%s member=%s declared=%d actual=%d",
            account_id, member_id, declared, actual,
        )
