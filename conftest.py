# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared fixtures: an isolated in-memory roster stack per test."""

import pytest

from guild_roster.models.domain import ACTIVITY_TYPES, Group, Member, Party
from guild_roster.models.snapshot import GROUPS, MEMBERS, PARTIES
from guild_roster.repositories.document_store import InMemoryDocumentStore
from guild_roster.repositories.member_repository import MemberRepository
from guild_roster.repositories.roster_repository import RosterRepository
from guild_roster.services.assignment_service import AssignmentService
from guild_roster.services.group_service import GroupService
from guild_roster.services.member_service import MemberService
from guild_roster.services.party_service import PartyService
from guild_roster.services.sync import sync_member_assignments
from guild_roster.services.unit_of_work import RosterUnitOfWork

ACCOUNT = "guild-1"


def seed_roster(uow, groups=(), parties=(), member_ids=range(1, 11), account_id=ACCOUNT):
    """Write members, groups and parties directly, with consistent back-references."""
    snapshot = uow.load(account_id)
    snapshot.members = [Member(id=i, name=f"Member {i}") for i in member_ids]
    snapshot.groups = list(groups)
    snapshot.parties = list(parties)
    for activity_type in ACTIVITY_TYPES:
        sync_member_assignments(snapshot, activity_type, member_ids)
    snapshot.touch(GROUPS, PARTIES, MEMBERS)
    uow.commit(snapshot)
    return snapshot


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def uow(store):
    return RosterUnitOfWork(store, RosterRepository(store), MemberRepository(store))


@pytest.fixture
def engine(uow):
    return AssignmentService(uow)


@pytest.fixture
def strict_engine(uow):
    return AssignmentService(uow, strict_swap_positions=True)


@pytest.fixture
def party_service(uow):
    return PartyService(uow)


@pytest.fixture
def group_service(uow):
    return GroupService(uow, default_parties_per_type=20)


@pytest.fixture
def member_service(uow, store):
    return MemberService(uow, MemberRepository(store))


@pytest.fixture
def roster(uow):
    """Members 1-10; G1 (kvm) owns P1=[1,2,3,0,0] and P2=[4,0,0,0,0]; P3 (gvg)=[1,0,0,0,0]."""
    return seed_roster(
        uow,
        groups=[Group(id="G1", name="KVM Group", activity_type="kvm", party_ids=["P1", "P2"])],
        parties=[
            Party(id="P1", name="Alpha", activity_type="kvm", group_id="G1", slots=[1, 2, 3, 0, 0]),
            Party(id="P2", name="Bravo", activity_type="kvm", group_id="G1", slots=[4, 0, 0, 0, 0]),
            Party(id="P3", name="Siege", activity_type="gvg", slots=[1, 0, 0, 0, 0]),
        ],
    )
