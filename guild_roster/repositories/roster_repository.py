# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: group and party documents for one account.
Parties are stored partitioned by activity type, one document per type.
NO business rules here — pure load/save.
"""

from typing import Any

from guild_roster.models.domain import ACTIVITY_TYPES, Group, Party

GROUPS_KEY = "groups"
PARTIES_KEY_PREFIX = "parties:"


def parties_key(activity_type: str) -> str:
    return f"{PARTIES_KEY_PREFIX}{activity_type}"


class RosterRepository:
    """Loads and serializes groups and parties through a document store."""

    def __init__(self, store) -> None:
        self._store = store

    # ── Read ──

    def load_groups(self, account_id: str) -> list[Group]:
        raw = self._store.get(account_id, GROUPS_KEY) or []
        return [Group.model_validate(g) for g in raw]

    def load_parties(self, account_id: str) -> list[Party]:
        parties: list[Party] = []
        for activity_type in ACTIVITY_TYPES:
            raw = self._store.get(account_id, parties_key(activity_type)) or []
            parties.extend(Party.model_validate(p) for p in raw)
        return parties

    # ── Serialize ──

    def group_documents(self, groups: list[Group]) -> dict[str, list[dict[str, Any]]]:
        return {GROUPS_KEY: [g.model_dump(mode="json") for g in groups]}

    def party_documents(self, parties: list[Party]) -> dict[str, list[dict[str, Any]]]:
        return {
            parties_key(activity_type): [
                p.model_dump(mode="json") for p in parties if p.activity_type == activity_type
            ]
            for activity_type in ACTIVITY_TYPES
        }

    # ── Write ──

    def save_groups(self, account_id: str, groups: list[Group]) -> None:
        self._store.put_many(account_id, self.group_documents(groups))

    def save_parties(self, account_id: str, parties: list[Party]) -> None:
        self._store.put_many(account_id, self.party_documents(parties))
