# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request-scoped roster snapshot: every group, party and member of one account.

Loaded fresh at the start of an operation and written back by the unit of
work. Services mark which document families they mutated so only those are
persisted.
"""

from typing import Iterable, Optional

from guild_roster.models.domain import Group, Member, Party

GROUPS = "groups"
PARTIES = "parties"
MEMBERS = "members"


class RosterSnapshot:
    """In-memory view of one account's roster."""

    def __init__(
        self,
        account_id: str,
        groups: list[Group],
        parties: list[Party],
        members: list[Member],
    ) -> None:
        self.account_id = account_id
        self.groups = groups
        self.parties = parties
        self.members = members
        self.dirty: set[str] = set()

    # ── Lookups ──

    def group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self.groups if g.id == group_id), None)

    def party(self, party_id: str) -> Optional[Party]:
        return next((p for p in self.parties if p.id == party_id), None)

    def member(self, member_id: int) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def parties_of_type(self, activity_type: str) -> list[Party]:
        return [p for p in self.parties if p.activity_type == activity_type]

    def parties_in_group(self, group_id: str) -> list[Party]:
        return [p for p in self.parties if p.group_id == group_id]

    def locate(self, member_id: int, activity_type: str) -> Optional[tuple[Party, int]]:
        """Return the (party, slot) a member actually holds for an activity type."""
        for party in self.parties_of_type(activity_type):
            slot = party.slot_of(member_id)
            if slot is not None:
                return party, slot
        return None

    # ── Change tracking ──

    def touch(self, *families: str) -> None:
        self.dirty.update(families)

    def is_dirty(self, family: str) -> bool:
        return family in self.dirty

    def remove_parties(self, party_ids: Iterable[str]) -> None:
        doomed = set(party_ids)
        self.parties = [p for p in self.parties if p.id not in doomed]
        self.touch(PARTIES)
