# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the group registry, party registry and member directory.
"""

import pytest

from conftest import ACCOUNT, seed_roster
from guild_roster.core.errors import (
    ActivityTypeMismatchError,
    DuplicateMemberError,
    DuplicateSlotMemberError,
    FullError,
    InvalidProfileError,
    InvalidSlotCountError,
    NotFoundError,
)
from guild_roster.models.domain import MAX_PARTIES_PER_GROUP, PARTY_SIZE, Group, Party
from guild_roster.services.sync import find_invariant_violations


# ============================================
# Group registry
# ============================================
class TestGroups:
    def test_create_and_get(self, group_service):
        created = group_service.create_group(ACCOUNT, "Night Raid", "kvm", description="late")
        fetched = group_service.get_group(ACCOUNT, created["id"])
        assert fetched["name"] == "Night Raid"
        assert fetched["activity_type"] == "kvm"
        assert fetched["description"] == "late"
        assert fetched["party_ids"] == []

    def test_list_filters_by_activity_type(self, group_service):
        group_service.create_group(ACCOUNT, "A", "kvm")
        group_service.create_group(ACCOUNT, "B", "gvg")
        assert [g["name"] for g in group_service.list_groups(ACCOUNT)] == ["A", "B"]
        assert [g["name"] for g in group_service.list_groups(ACCOUNT, "gvg")] == ["B"]

    def test_groups_are_scoped_per_account(self, group_service):
        group_service.create_group(ACCOUNT, "A", "kvm")
        assert group_service.list_groups("other-guild") == []

    def test_update_name_and_description(self, group_service, roster):
        updated = group_service.update_group(ACCOUNT, "G1", name="Renamed", description="new")
        assert updated["name"] == "Renamed"
        assert updated["description"] == "new"
        assert updated["party_ids"] == ["P1", "P2"]

    def test_type_change_rejected_while_parties_exist(self, group_service, roster):
        with pytest.raises(ActivityTypeMismatchError):
            group_service.update_group(ACCOUNT, "G1", activity_type="gvg")
        assert group_service.get_group(ACCOUNT, "G1")["activity_type"] == "kvm"

    def test_type_change_allowed_on_empty_group(self, group_service):
        created = group_service.create_group(ACCOUNT, "Empty", "kvm")
        updated = group_service.update_group(ACCOUNT, created["id"], activity_type="gvg")
        assert updated["activity_type"] == "gvg"

    def test_unknown_group_raises_not_found(self, group_service):
        with pytest.raises(NotFoundError):
            group_service.get_group(ACCOUNT, "missing")
        with pytest.raises(NotFoundError):
            group_service.update_group(ACCOUNT, "missing", name="x")

    def test_delete_cascades_parties_and_assignments(self, uow, group_service, roster):
        assert group_service.delete_group(ACCOUNT, "G1") is True

        snapshot = uow.load(ACCOUNT)
        assert snapshot.group("G1") is None
        assert [p.id for p in snapshot.parties] == ["P3"]
        for member_id in (1, 2, 3, 4):
            assert "kvm" not in snapshot.member(member_id).assignments
        assert snapshot.member(1).assignments["gvg"].party_id == "P3"
        assert find_invariant_violations(snapshot) == []

    def test_delete_missing_group_returns_false(self, group_service):
        assert group_service.delete_group(ACCOUNT, "missing") is False

    def test_group_with_parties_resolves_members(self, group_service, roster):
        view = group_service.get_group_with_parties(ACCOUNT, "G1")
        assert [p["id"] for p in view["parties"]] == ["P1", "P2"]
        assert view["total_members"] == 4
        assert [m["id"] for m in view["parties"][0]["members"]] == [1, 2, 3]

    def test_bootstrap_creates_default_roster(self, uow, group_service):
        result = group_service.bootstrap_defaults(ACCOUNT)
        assert result == {"created": True, "groups": 8, "parties": 40}

        snapshot = uow.load(ACCOUNT)
        for activity_type in ("kvm", "gvg"):
            assert len(snapshot.parties_of_type(activity_type)) == 20
        for group in snapshot.groups:
            assert len(group.party_ids) <= MAX_PARTIES_PER_GROUP
            for party in snapshot.parties_in_group(group.id):
                assert party.activity_type == group.activity_type
                assert party.slots == [0] * PARTY_SIZE
        assert snapshot.groups[0].name == "KVM Group 1"
        assert snapshot.parties[0].name == "KVM Party 1"

    def test_bootstrap_is_skipped_when_roster_exists(self, group_service, roster):
        result = group_service.bootstrap_defaults(ACCOUNT)
        assert result == {"created": False, "groups": 1, "parties": 3}

    def test_bootstrap_runs_once(self, group_service):
        group_service.bootstrap_defaults(ACCOUNT)
        again = group_service.bootstrap_defaults(ACCOUNT)
        assert again["created"] is False
        assert again["parties"] == 40


# ============================================
# Party registry
# ============================================
class TestParties:
    def test_create_in_group_links_both_sides(self, uow, party_service, roster):
        created = party_service.create_party(ACCOUNT, "Charlie", "kvm", group_id="G1")
        assert created["slots"] == [0] * PARTY_SIZE
        assert created["leader_id"] is None
        assert created["members"] == []
        group = uow.load(ACCOUNT).group("G1")
        assert group.party_ids == ["P1", "P2", created["id"]]

    def test_create_without_group(self, party_service):
        created = party_service.create_party(ACCOUNT, "Loose", "gvg")
        assert created["group_id"] is None
        assert party_service.list_parties(ACCOUNT)[0]["id"] == created["id"]

    def test_group_at_capacity_rejects_new_party(self, uow, party_service):
        party_ids = [f"P{i}" for i in range(1, MAX_PARTIES_PER_GROUP + 1)]
        seed_roster(
            uow,
            groups=[Group(id="G1", name="Full", activity_type="kvm", party_ids=party_ids)],
            parties=[
                Party(id=pid, name=pid, activity_type="kvm", group_id="G1") for pid in party_ids
            ],
        )
        with pytest.raises(FullError):
            party_service.create_party(ACCOUNT, "Sixth", "kvm", group_id="G1")

        snapshot = uow.load(ACCOUNT)
        assert snapshot.group("G1").party_ids == party_ids
        assert len(snapshot.parties) == MAX_PARTIES_PER_GROUP

    def test_unknown_group_raises_not_found(self, party_service):
        with pytest.raises(NotFoundError):
            party_service.create_party(ACCOUNT, "Orphan", "kvm", group_id="missing")

    def test_group_of_other_type_rejected(self, party_service, roster):
        with pytest.raises(ActivityTypeMismatchError):
            party_service.create_party(ACCOUNT, "Wrong", "gvg", group_id="G1")

    def test_too_many_slots_rejected(self, party_service, roster):
        with pytest.raises(InvalidSlotCountError):
            party_service.create_party(ACCOUNT, "Big", "kvm", slots=[5, 6, 7, 8, 9, 10])

    def test_short_slot_list_is_padded(self, uow, party_service, roster):
        created = party_service.create_party(ACCOUNT, "Short", "gvg", slots=[5, 6])
        assert created["slots"] == [5, 6, 0, 0, 0]
        assert created["leader_id"] == 5
        member = uow.load(ACCOUNT).member(5)
        assert member.assignments["gvg"].party_id == created["id"]
        assert member.assignments["gvg"].is_leader is True

    def test_supplied_slots_evict_from_other_parties(self, uow, party_service, roster):
        created = party_service.create_party(ACCOUNT, "Poach", "kvm", slots=[2, 4])
        snapshot = uow.load(ACCOUNT)
        assert snapshot.party("P1").slots == [1, 0, 3, 0, 0]
        assert snapshot.party("P2").slots == [0, 0, 0, 0, 0]
        assert snapshot.member(4).assignments["kvm"].party_id == created["id"]
        assert find_invariant_violations(snapshot) == []

    def test_duplicate_slot_members_rejected(self, party_service, roster):
        with pytest.raises(DuplicateSlotMemberError):
            party_service.create_party(ACCOUNT, "Dup", "kvm", slots=[5, 5])

    def test_unknown_slot_member_rejected(self, uow, party_service, roster):
        with pytest.raises(NotFoundError):
            party_service.create_party(ACCOUNT, "Ghost", "kvm", slots=[5, 99])
        assert len(uow.load(ACCOUNT).parties) == 3

    def test_update_slots_releases_former_members(self, uow, party_service, roster):
        updated = party_service.update_party(ACCOUNT, "P1", slots=[3, 5])
        assert updated["slots"] == [3, 5, 0, 0, 0]
        snapshot = uow.load(ACCOUNT)
        assert "kvm" not in snapshot.member(1).assignments
        assert "kvm" not in snapshot.member(2).assignments
        assert snapshot.member(3).assignments["kvm"].is_leader is True
        assert find_invariant_violations(snapshot) == []

    def test_update_name_only_keeps_slots(self, party_service, roster):
        updated = party_service.update_party(ACCOUNT, "P1", name="Renamed")
        assert updated["name"] == "Renamed"
        assert updated["slots"] == [1, 2, 3, 0, 0]

    def test_update_unknown_party(self, party_service):
        with pytest.raises(NotFoundError):
            party_service.update_party(ACCOUNT, "missing", name="x")

    def test_delete_unlinks_group_and_frees_members(self, uow, party_service, roster):
        assert party_service.delete_party(ACCOUNT, "P1") is True
        snapshot = uow.load(ACCOUNT)
        assert snapshot.group("G1").party_ids == ["P2"]
        assert "kvm" not in snapshot.member(2).assignments
        assert snapshot.member(1).assignments["gvg"].party_id == "P3"

    def test_delete_missing_party_returns_false(self, party_service):
        assert party_service.delete_party(ACCOUNT, "missing") is False

    def test_view_lists_members_in_slot_order(self, party_service, roster, engine):
        engine.swap_members(ACCOUNT, 1, 3, "kvm")
        view = party_service.get_party_with_members(ACCOUNT, "P1")
        assert [m["id"] for m in view["members"]] == [3, 2, 1]
        assert view["leader"]["id"] == 3

    def test_list_filters(self, party_service, roster):
        assert {p["id"] for p in party_service.list_parties(ACCOUNT)} == {"P1", "P2", "P3"}
        assert [p["id"] for p in party_service.list_parties(ACCOUNT, "gvg")] == ["P3"]
        assert [p["id"] for p in party_service.list_parties(ACCOUNT, group_id="G1")] == ["P1", "P2"]


# ============================================
# Member directory
# ============================================
class TestMembers:
    def test_create_assigns_next_id(self, member_service, roster):
        created = member_service.create_member(ACCOUNT, "Newbie", level=12)
        assert created["id"] == 11
        assert created["level"] == 12
        assert created["assignments"] == {}

    def test_create_with_explicit_id(self, member_service):
        created = member_service.create_member(ACCOUNT, "Vet", member_id=40)
        assert created["id"] == 40
        assert member_service.get_member(ACCOUNT, 40)["name"] == "Vet"

    def test_duplicate_id_rejected(self, member_service, roster):
        with pytest.raises(DuplicateMemberError):
            member_service.create_member(ACCOUNT, "Copy", member_id=3)

    def test_update_profile_keeps_assignments(self, member_service, roster):
        updated = member_service.update_member(
            ACCOUNT, 2, {"level": 50, "character_class": "mage", "name": None}
        )
        assert updated["level"] == 50
        assert updated["character_class"] == "mage"
        assert updated["name"] == "Member 2"
        assert updated["assignments"]["kvm"]["party_id"] == "P1"

    def test_update_ignores_assignment_patches(self, member_service, roster):
        updated = member_service.update_member(
            ACCOUNT, 2, {"assignments": {}, "sort": 3}
        )
        assert updated["sort"] == 3
        assert updated["assignments"]["kvm"]["party_id"] == "P1"

    def test_update_with_invalid_field_leaves_member_unchanged(self, member_service, roster):
        with pytest.raises(InvalidProfileError):
            member_service.update_member(ACCOUNT, 2, {"level": -1})
        member = member_service.get_member(ACCOUNT, 2)
        assert member["level"] is None
        assert member["assignments"]["kvm"]["party_id"] == "P1"

    def test_update_unknown_member(self, member_service):
        with pytest.raises(NotFoundError):
            member_service.update_member(ACCOUNT, 99, {"level": 1})

    def test_delete_frees_every_seat(self, uow, member_service, roster):
        result = member_service.delete_member(ACCOUNT, 1)
        assert result["status"] == "deleted"
        assert result["freed_parties"] == ["P1", "P3"]
        snapshot = uow.load(ACCOUNT)
        assert snapshot.party("P1").leader_id is None
        assert snapshot.party("P3").slots == [0] * PARTY_SIZE
        assert snapshot.member(1) is None
        assert find_invariant_violations(snapshot) == []

    def test_delete_unknown_member(self, member_service):
        with pytest.raises(NotFoundError):
            member_service.delete_member(ACCOUNT, 99)

    def test_unassigned_by_activity_type(self, member_service, roster):
        idle_kvm = [m["id"] for m in member_service.unassigned_members(ACCOUNT, "kvm")]
        idle_gvg = [m["id"] for m in member_service.unassigned_members(ACCOUNT, "gvg")]
        assert idle_kvm == [5, 6, 7, 8, 9, 10]
        assert idle_gvg == [2, 3, 4, 5, 6, 7, 8, 9, 10]

    def test_unassigned_without_type_means_no_seat_at_all(self, member_service, roster):
        idle = [m["id"] for m in member_service.unassigned_members(ACCOUNT)]
        assert idle == [5, 6, 7, 8, 9, 10]

    def test_list_is_sorted_by_id(self, member_service, roster):
        member_service.create_member(ACCOUNT, "Late", member_id=20)
        ids = [m["id"] for m in member_service.list_members(ACCOUNT)]
        assert ids == sorted(ids)
        assert ids[-1] == 20
