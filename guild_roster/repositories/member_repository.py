# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: member directory documents.
Each member carries its own ``assignments`` map. NO business rules here.
"""

from typing import Any, Optional

from guild_roster.models.domain import Member

MEMBERS_KEY = "members"


class MemberRepository:
    """Loads and serializes the member list of one account."""

    def __init__(self, store) -> None:
        self._store = store

    # ── Read ──

    def load_members(self, account_id: str) -> list[Member]:
        raw = self._store.get(account_id, MEMBERS_KEY) or []
        return [Member.model_validate(m) for m in raw]

    def get_member(self, account_id: str, member_id: int) -> Optional[Member]:
        return next((m for m in self.load_members(account_id) if m.id == member_id), None)

    # ── Serialize ──

    def member_documents(self, members: list[Member]) -> dict[str, list[dict[str, Any]]]:
        return {MEMBERS_KEY: [m.model_dump(mode="json") for m in members]}

    # ── Write ──

    def save_members(self, account_id: str, members: list[Member]) -> None:
        self._store.put_many(account_id, self.member_documents(members))

    def save_member(
        self, account_id: str, member_id: int, patch: dict[str, Any]
    ) -> Optional[Member]:
        """Merge ``patch`` into one member and persist. Returns None when absent."""
        members = self.load_members(account_id)
        for index, member in enumerate(members):
            if member.id == member_id:
                merged = member.model_dump()
                merged.update(patch)
                merged["id"] = member_id
                members[index] = Member.model_validate(merged)
                self.save_members(account_id, members)
                return members[index]
        return None
