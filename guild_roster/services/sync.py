# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: member back-reference synchronization.

Party slot arrays are the source of truth. A member's ``assignments`` entry
for an activity type is always rewritten from them, never edited on its own.
Pure snapshot manipulation — no I/O, no metrics.
"""

from collections import Counter
from typing import Iterable

from guild_roster.core.logging import get_logger
from guild_roster.models.domain import (
    ACTIVITY_TYPES,
    EMPTY_SLOT,
    LEADER_SLOT,
    PARTY_SIZE,
    PartyAssignment,
)
from guild_roster.models.snapshot import MEMBERS, RosterSnapshot

logger = get_logger(__name__)


def sync_member_assignments(
    snapshot: RosterSnapshot,
    activity_type: str,
    member_ids: Iterable[int],
) -> list[int]:
    """Recompute ``assignments[activity_type]`` for the given members.

    Returns the ids whose entry actually changed.
    """
    changed: list[int] = []
    for member_id in sorted(set(member_ids) - {EMPTY_SLOT}):
        member = snapshot.member(member_id)
        if member is None:
            logger.warning(
                "Slot references unknown member: account=%s member=%s",
                snapshot.account_id, member_id,
            )
            continue

        current = member.assignments.get(activity_type)
        located = snapshot.locate(member_id, activity_type)
        if located is None:
            if current is not None:
                del member.assignments[activity_type]
                changed.append(member_id)
            continue

        party, slot = located
        desired = PartyAssignment(party_id=party.id, is_leader=slot == LEADER_SLOT)
        if current != desired:
            member.assignments[activity_type] = desired
            changed.append(member_id)

    if changed:
        snapshot.touch(MEMBERS)
    return changed


def drop_assignments_to_party(snapshot: RosterSnapshot, party_id: str) -> list[int]:
    """Remove every member entry pointing at ``party_id`` (full directory scan)."""
    dropped: list[int] = []
    for member in snapshot.members:
        for activity_type, assignment in list(member.assignments.items()):
            if assignment.party_id == party_id:
                del member.assignments[activity_type]
                dropped.append(member.id)
    if dropped:
        snapshot.touch(MEMBERS)
    return dropped


def find_invariant_violations(snapshot: RosterSnapshot) -> list[str]:
    """Describe every slot-length, uniqueness or back-reference violation."""
    violations: list[str] = []

    for party in snapshot.parties:
        if len(party.slots) != PARTY_SIZE:
            violations.append(
                f"party {party.id} has {len(party.slots)} slots, expected {PARTY_SIZE}"
            )

    for activity_type in ACTIVITY_TYPES:
        seats = Counter(
            member_id
            for party in snapshot.parties_of_type(activity_type)
            for member_id in party.occupants()
        )
        for member_id, count in sorted(seats.items()):
            if count > 1:
                violations.append(
                    f"member {member_id} holds {count} {activity_type} slots"
                )

        for member in snapshot.members:
            entry = member.assignments.get(activity_type)
            located = snapshot.locate(member.id, activity_type)
            if located is None:
                if entry is not None:
                    violations.append(
                        f"member {member.id} has a {activity_type} entry "
                        f"for party {entry.party_id} but holds no slot"
                    )
                continue
            party, slot = located
            if entry is None:
                violations.append(
                    f"member {member.id} sits in party {party.id} "
                    f"without a {activity_type} entry"
                )
            elif entry.party_id != party.id or entry.is_leader != (slot == LEADER_SLOT):
                violations.append(
                    f"member {member.id} {activity_type} entry "
                    f"({entry.party_id}, leader={entry.is_leader}) disagrees with "
                    f"slot {slot} of party {party.id}"
                )

    return violations
