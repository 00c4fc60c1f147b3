# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire store, repositories and services.
"""

from fastapi import Header

from guild_roster.core.config import settings
from guild_roster.core.database import build_engine
from guild_roster.repositories.document_store import InMemoryDocumentStore, SqlDocumentStore
from guild_roster.repositories.member_repository import MemberRepository
from guild_roster.repositories.roster_repository import RosterRepository
from guild_roster.services.assignment_service import AssignmentService
from guild_roster.services.group_service import GroupService
from guild_roster.services.member_service import MemberService
from guild_roster.services.party_service import PartyService
from guild_roster.services.unit_of_work import RosterUnitOfWork

# ── Singleton store + repositories (SQL when DATABASE_URL is set) ──
_engine = build_engine()
_store = SqlDocumentStore(_engine) if _engine is not None else InMemoryDocumentStore()
_roster_repo = RosterRepository(_store)
_member_repo = MemberRepository(_store)
_uow = RosterUnitOfWork(_store, _roster_repo, _member_repo)

# ── Service instances (with injected dependencies) ──
_assignment_service = AssignmentService(
    _uow, strict_swap_positions=settings.STRICT_SWAP_POSITIONS
)
_party_service = PartyService(_uow)
_group_service = GroupService(
    _uow, default_parties_per_type=settings.DEFAULT_PARTIES_PER_TYPE
)
_member_service = MemberService(_uow, _member_repo)


# ── FastAPI dependency functions ──
def get_account_id(x_account_id: str = Header(..., alias="X-Account-ID", min_length=1)) -> str:
    """Account scope of the request; authentication happens upstream."""
    return x_account_id


def get_assignment_service() -> AssignmentService:
    return _assignment_service


def get_party_service() -> PartyService:
    return _party_service


def get_group_service() -> GroupService:
    return _group_service


def get_member_service() -> MemberService:
    return _member_service


def get_unit_of_work() -> RosterUnitOfWork:
    return _uow


def get_store():
    return _store
