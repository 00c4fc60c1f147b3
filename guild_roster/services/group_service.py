# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Group registry — CRUD over named collections of parties.
Deleting a group deletes its parties first and releases their members.
"""

from typing import Any, Optional

from guild_roster.core.errors import ActivityTypeMismatchError, NotFoundError
from guild_roster.core.logging import get_logger
from guild_roster.metrics.prometheus import GROUPS_CREATED, PARTIES_CREATED
from guild_roster.models.domain import (
    ACTIVITY_TYPES,
    MAX_PARTIES_PER_GROUP,
    Group,
    Party,
)
from guild_roster.models.snapshot import GROUPS, PARTIES, RosterSnapshot
from guild_roster.services.party_service import discard_party, party_view
from guild_roster.services.unit_of_work import RosterUnitOfWork

logger = get_logger(__name__)


def require_group(snapshot: RosterSnapshot, group_id: str) -> Group:
    group = snapshot.group(group_id)
    if group is None:
        raise NotFoundError(f"Group '{group_id}' not found")
    return group


class GroupService:
    """Business logic for group management and the default roster seed."""

    def __init__(self, uow: RosterUnitOfWork, default_parties_per_type: int = 20) -> None:
        self._uow = uow
        self._default_parties_per_type = default_parties_per_type

    # ── Commands ──

    def create_group(
        self,
        account_id: str,
        name: str,
        activity_type: str,
        description: Optional[str] = None,
    ) -> dict[str, Any]:
        with self._uow.session(account_id, "create_group") as snapshot:
            group = Group(name=name, activity_type=activity_type, description=description)
            snapshot.groups.append(group)
            snapshot.touch(GROUPS)

        GROUPS_CREATED.labels(activity_type=activity_type).inc()
        logger.info(
            "Group created: account=%s group=%s type=%s", account_id, group.id, activity_type
        )
        return group.model_dump(mode="json")

    def update_group(
        self,
        account_id: str,
        group_id: str,
        name: Optional[str] = None,
        activity_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict[str, Any]:
        """Partially update a group. Raises NotFoundError / ActivityTypeMismatchError."""
        with self._uow.session(account_id, "update_group") as snapshot:
            group = require_group(snapshot, group_id)
            if activity_type is not None and activity_type != group.activity_type:
                if group.party_ids:
                    raise ActivityTypeMismatchError(
                        f"Group '{group.name}' still holds {group.activity_type} parties"
                    )
                group.activity_type = activity_type
            if name:
                group.name = name
            if description is not None:
                group.description = description
            group.touch()
            snapshot.touch(GROUPS)

        logger.info("Group updated: account=%s group=%s", account_id, group_id)
        return group.model_dump(mode="json")

    def delete_group(self, account_id: str, group_id: str) -> bool:
        with self._uow.session(account_id, "delete_group") as snapshot:
            group = snapshot.group(group_id)
            if group is None:
                return False
            owned = [p for p in snapshot.parties if p.id in group.party_ids or p.group_id == group_id]
            for party in owned:
                discard_party(snapshot, party)
            snapshot.groups = [g for g in snapshot.groups if g.id != group_id]
            snapshot.touch(GROUPS)

        logger.info(
            "Group deleted: account=%s group=%s parties=%d",
            account_id, group_id, len(owned),
        )
        return True

    # ── Queries ──

    def get_group(self, account_id: str, group_id: str) -> dict[str, Any]:
        snapshot = self._uow.read(account_id)
        return require_group(snapshot, group_id).model_dump(mode="json")

    def get_group_with_parties(self, account_id: str, group_id: str) -> dict[str, Any]:
        snapshot = self._uow.read(account_id)
        group = require_group(snapshot, group_id)
        parties = []
        for party_id in group.party_ids:
            party = snapshot.party(party_id)
            if party is not None:
                parties.append(party_view(snapshot, party))
        record = group.model_dump(mode="json")
        record["parties"] = parties
        record["total_members"] = sum(len(p["members"]) for p in parties)
        return record

    def list_groups(
        self, account_id: str, activity_type: Optional[str] = None
    ) -> list[dict[str, Any]]:
        snapshot = self._uow.read(account_id)
        return [
            g.model_dump(mode="json")
            for g in snapshot.groups
            if activity_type is None or g.activity_type == activity_type
        ]

    # ── Seed ──

    def bootstrap_defaults(self, account_id: str) -> dict[str, Any]:
        """Create the default groups and parties once per account.

        Parties are spread over as many groups as the per-group cap requires.
        """
        with self._uow.session(account_id, "bootstrap") as snapshot:
            if snapshot.groups or snapshot.parties:
                logger.info("Roster already exists, skipping seed: account=%s", account_id)
                return {
                    "created": False,
                    "groups": len(snapshot.groups),
                    "parties": len(snapshot.parties),
                }

            for activity_type in ACTIVITY_TYPES:
                label = activity_type.upper()
                group = None
                for number in range(1, self._default_parties_per_type + 1):
                    if group is None or len(group.party_ids) >= MAX_PARTIES_PER_GROUP:
                        group_number = (number - 1) // MAX_PARTIES_PER_GROUP + 1
                        group = Group(
                            name=f"{label} Group {group_number}",
                            activity_type=activity_type,
                            description=f"{label} activity organization",
                        )
                        snapshot.groups.append(group)
                        GROUPS_CREATED.labels(activity_type=activity_type).inc()
                    party = Party(
                        name=f"{label} Party {number}",
                        activity_type=activity_type,
                        group_id=group.id,
                    )
                    snapshot.parties.append(party)
                    group.party_ids.append(party.id)
                    PARTIES_CREATED.labels(activity_type=activity_type).inc()
            snapshot.touch(GROUPS, PARTIES)
            summary = {
                "created": True,
                "groups": len(snapshot.groups),
                "parties": len(snapshot.parties),
            }

        logger.info(
            "Seeded default roster: account=%s groups=%d parties=%d",
            account_id, summary["groups"], summary["parties"],
        )
        return summary
