# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member directory — member identity and profile fields.
Party back-references are owned by the roster services and never patched here.
"""

from typing import Any, Optional

from pydantic import ValidationError

from guild_roster.core.errors import DuplicateMemberError, InvalidProfileError, NotFoundError
from guild_roster.core.logging import get_logger
from guild_roster.metrics.prometheus import OPERATION_FAILURES
from guild_roster.models.domain import Member
from guild_roster.models.snapshot import MEMBERS, PARTIES
from guild_roster.repositories.member_repository import MemberRepository
from guild_roster.services.unit_of_work import RosterUnitOfWork

logger = get_logger(__name__)

PROFILE_FIELDS = ("name", "level", "character_class", "sort")


class MemberService:
    """Business logic for guild member records."""

    def __init__(self, uow: RosterUnitOfWork, member_repo: MemberRepository) -> None:
        self._uow = uow
        self._members = member_repo

    # ── Commands ──

    def create_member(
        self,
        account_id: str,
        name: str,
        member_id: Optional[int] = None,
        level: Optional[int] = None,
        character_class: Optional[str] = None,
        sort: Optional[int] = None,
    ) -> dict[str, Any]:
        """Add a member. The id defaults to one above the highest existing id."""
        with self._uow.session(account_id, "create_member") as snapshot:
            if member_id is None:
                member_id = max((m.id for m in snapshot.members), default=0) + 1
            elif snapshot.member(member_id) is not None:
                raise DuplicateMemberError(f"Member {member_id} already exists")

            member = Member(
                id=member_id,
                name=name,
                level=level,
                character_class=character_class,
                sort=sort,
            )
            snapshot.members.append(member)
            snapshot.touch(MEMBERS)

        logger.info("Member created: account=%s member=%s", account_id, member_id)
        return member.model_dump(mode="json")

    def update_member(
        self, account_id: str, member_id: int, changes: dict[str, Any]
    ) -> dict[str, Any]:
        patch = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        if patch.get("name") is None:
            patch.pop("name", None)
        try:
            with self._uow.lock(account_id):
                member = self._members.save_member(account_id, member_id, patch)
        except ValidationError as exc:
            OPERATION_FAILURES.labels(
                operation="update_member", reason=InvalidProfileError.reason
            ).inc()
            logger.warning(
                "Member update rejected: account=%s member=%s errors=%d",
                account_id, member_id, exc.error_count(),
            )
            raise InvalidProfileError(
                f"Invalid profile for member {member_id}: {exc.errors()[0]['msg']}"
            ) from exc
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")

        logger.info(
            "Member updated: account=%s member=%s fields=%s",
            account_id, member_id, sorted(patch),
        )
        return member.model_dump(mode="json")

    def delete_member(self, account_id: str, member_id: int) -> dict[str, Any]:
        """Delete a member and free every seat it held."""
        with self._uow.session(account_id, "delete_member") as snapshot:
            if snapshot.member(member_id) is None:
                raise NotFoundError(f"Member {member_id} not found")

            freed: list[str] = []
            for party in snapshot.parties:
                if party.vacate(member_id) is not None:
                    party.touch()
                    freed.append(party.id)
            if freed:
                snapshot.touch(PARTIES)
            snapshot.members = [m for m in snapshot.members if m.id != member_id]
            snapshot.touch(MEMBERS)

        logger.info(
            "Member deleted: account=%s member=%s freed_parties=%s",
            account_id, member_id, freed,
        )
        return {"status": "deleted", "member_id": member_id, "freed_parties": freed}

    # ── Queries ──

    def list_members(self, account_id: str) -> list[dict[str, Any]]:
        members = self._members.load_members(account_id)
        return [m.model_dump(mode="json") for m in sorted(members, key=lambda m: m.id)]

    def get_member(self, account_id: str, member_id: int) -> dict[str, Any]:
        member = self._members.get_member(account_id, member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return member.model_dump(mode="json")

    def unassigned_members(
        self, account_id: str, activity_type: Optional[str] = None
    ) -> list[dict[str, Any]]:
        """Members without a seat for ``activity_type``, or without any seat."""
        members = self._members.load_members(account_id)
        if activity_type is None:
            idle = [m for m in members if not m.assignments]
        else:
            idle = [m for m in members if activity_type not in m.assignments]
        return [m.model_dump(mode="json") for m in sorted(idle, key=lambda m: m.id)]
