"""Tests for RosterManager lifecycle: total, resize and member patches."""

import itertools
import logging
from decimal import Decimal

import pytest

from split_core.models import Member, RosterSnapshot, TimeRange
from split_core.roster import DEFAULT_MEMBER_COUNT, RosterManager


@pytest.fixture
def counter_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def manager(counter_ids):
    return RosterManager(size=3, id_factory=counter_ids)


class TestConstruction:
    def test_default_size(self):
        mgr = RosterManager()
        assert len(mgr) == DEFAULT_MEMBER_COUNT == 5

    def test_members_start_empty(self, manager):
        for m in manager.members:
            assert m.name == ""
            assert m.hours == 0
            assert m.time_range is None
            assert m.amount == 0
        assert manager.total == 0

    def test_ids_unique(self):
        mgr = RosterManager(size=50)
        ids = [m.id for m in mgr.members]
        assert len(set(ids)) == 50

    def test_colliding_id_factory_is_retried(self):
        ids = iter(["a", "a", "b", "b", "c"])
        mgr = RosterManager(size=3, id_factory=lambda: next(ids))
        assert [m.id for m in mgr.members] == ["a", "b", "c"]

    def test_negative_size_is_empty(self):
        assert len(RosterManager(size=-2)) == 0


class TestSetTotal:
    def test_recomputes_with_new_total(self, manager):
        a, b, _ = manager.members
        manager.patch_member(a.id, hours=1)
        manager.patch_member(b.id, hours=3)
        snap = manager.set_total(100)
        assert snap.total == Decimal("100")
        assert [m.amount for m in snap.members] == [Decimal("25.00"), Decimal("75.00"), Decimal("0.00")]

    def test_none_clamps_to_zero(self, manager):
        manager.set_total(50)
        snap = manager.set_total(None)
        assert snap.total == 0
        assert all(m.amount == 0 for m in snap.members)

    def test_string_total(self, manager):
        assert manager.set_total("12.50").total == Decimal("12.50")

    def test_non_numeric_rejected(self, manager):
        with pytest.raises(ValueError):
            manager.set_total("lots")
        assert manager.total == 0


class TestResize:
    def test_grow_appends_empty_members(self, manager):
        before = [m.id for m in manager.members]
        snap = manager.resize(5)
        assert [m.id for m in snap.members][:3] == before
        assert [m.id for m in snap.members][3:] == ["id-4", "id-5"]
        assert all(m.hours == 0 and m.name == "" for m in snap.members[3:])

    def test_shrink_truncates_tail(self, manager):
        ids = [m.id for m in manager.members]
        snap = manager.resize(1)
        assert [m.id for m in snap.members] == ids[:1]

    def test_negative_is_noop(self, manager):
        before = manager.snapshot()
        assert manager.resize(-1) is before
        assert len(manager) == 3

    def test_idempotent(self, manager):
        first = manager.resize(4)
        second = manager.resize(4)
        assert first.members == second.members

    def test_truncation_is_destructive(self, manager):
        last = manager.members[-1]
        manager.patch_member(last.id, name="Zoe", hours=4)
        manager.resize(2)
        snap = manager.resize(3)
        regrown = snap.members[-1]
        assert regrown.id != last.id
        assert regrown.name == ""
        assert regrown.hours == 0

    def test_resize_to_zero(self, manager):
        manager.set_total(90)
        snap = manager.resize(0)
        assert snap.members == ()
        assert snap.total == Decimal("90")

    def test_recomputes_after_shrink(self, manager):
        a, b, c = manager.members
        manager.patch_member(a.id, hours=1)
        manager.patch_member(c.id, hours=1)
        manager.set_total(10)
        assert manager.member(a.id).amount == Decimal("5.00")
        manager.resize(2)
        assert manager.member(a.id).amount == Decimal("10.00")

    def test_add_and_remove_last(self, manager):
        assert len(manager.add_member()) == 4
        assert len(manager.remove_last()) == 3

    def test_remove_last_on_empty_is_noop(self):
        mgr = RosterManager(size=0)
        assert len(mgr.remove_last()) == 0


class TestPatchMember:
    def test_name(self, manager):
        m = manager.members[0]
        snap = manager.patch_member(m.id, name="Ann")
        assert snap.members[0].name == "Ann"
        assert snap.members[0].id == m.id

    def test_name_none_becomes_empty(self, manager):
        m = manager.members[0]
        manager.patch_member(m.id, name="Ann")
        assert manager.patch_member(m.id, name=None).members[0].name == ""

    def test_direct_hours_clear_time_range(self, manager):
        m = manager.members[0]
        manager.set_time_range(m.id, "09:00", "12:00")
        assert manager.member(m.id).time_range == TimeRange("09:00", "12:00")
        manager.patch_member(m.id, hours=5)
        patched = manager.member(m.id)
        assert patched.hours == Decimal("5")
        assert patched.time_range is None

    def test_time_range_derives_hours(self, manager):
        m = manager.members[0]
        snap = manager.set_time_range(m.id, "23:00", "01:00")
        assert snap.members[0].hours == Decimal("2.00")
        assert snap.members[0].time_range == TimeRange("23:00", "01:00")

    def test_time_range_wins_over_hours(self, manager):
        m = manager.members[0]
        manager.patch_member(m.id, hours=7, time_range=("09:00", "10:30"))
        assert manager.member(m.id).hours == Decimal("1.50")

    def test_time_range_as_dict(self, manager):
        m = manager.members[0]
        manager.patch_member(m.id, time_range={"start": "8:00", "end": "16:00"})
        assert manager.member(m.id).time_range == TimeRange("08:00", "16:00")

    def test_clear_time_range_zeroes_hours(self, manager):
        m = manager.members[0]
        manager.set_time_range(m.id, "09:00", "17:00")
        manager.clear_time_range(m.id)
        cleared = manager.member(m.id)
        assert cleared.time_range is None
        assert cleared.hours == 0

    def test_bad_time_range(self, manager):
        m = manager.members[0]
        with pytest.raises(ValueError):
            manager.patch_member(m.id, time_range="09:00-17:00")
        with pytest.raises(ValueError):
            manager.set_time_range(m.id, "9am", "5pm")

    def test_hours_none_and_negative_clamp(self, manager):
        m = manager.members[0]
        assert manager.patch_member(m.id, hours=None).members[0].hours == 0
        assert manager.patch_member(m.id, hours=-3).members[0].hours == 0

    def test_recomputes_everyone(self, manager):
        a, b, c = manager.members
        manager.set_total(300)
        manager.patch_member(a.id, hours=2)
        manager.patch_member(b.id, hours=3)
        snap = manager.patch_member(c.id, hours=5)
        assert [m.amount for m in snap.members] == [Decimal("60.00"), Decimal("90.00"), Decimal("150.00")]
        assert snap.allocated == snap.total

    def test_unknown_id_is_noop(self, manager, caplog):
        before = manager.snapshot()
        with caplog.at_level(logging.WARNING, logger="split_core.roster"):
            after = manager.patch_member("missing", hours=3)
        assert after is before
        assert "missing" in caplog.text

    def test_unknown_id_strict(self, manager):
        with pytest.raises(KeyError):
            manager.patch_member("missing", strict=True, hours=3)

    def test_unknown_field(self, manager):
        m = manager.members[0]
        with pytest.raises(ValueError, match="Unknown member field"):
            manager.patch_member(m.id, amount=10)


class TestSnapshots:
    def test_snapshot_is_immutable(self, manager):
        snap = manager.snapshot()
        assert isinstance(snap, RosterSnapshot)
        assert isinstance(snap.members, tuple)
        with pytest.raises(AttributeError):
            snap.members[0].hours = Decimal("3")

    def test_old_snapshot_unchanged_by_mutation(self, manager):
        m = manager.members[0]
        old = manager.snapshot()
        manager.patch_member(m.id, hours=2)
        manager.set_total(10)
        assert old.members[0].hours == 0
        assert old.total == 0

    def test_member_lookup(self, manager):
        m = manager.members[1]
        assert manager.member(m.id) == m
        with pytest.raises(KeyError):
            manager.member("nope")

    def test_amounts_never_stale(self, manager):
        """After any call, amounts equal a fresh allocation of the roster."""
        from split_core.allocation import allocate

        a, b, c = manager.members
        steps = [
            lambda: manager.set_total(77),
            lambda: manager.patch_member(a.id, hours=3),
            lambda: manager.set_time_range(b.id, "22:00", "02:15"),
            lambda: manager.resize(5),
            lambda: manager.patch_member(c.id, hours="1.25"),
            lambda: manager.resize(2),
            lambda: manager.set_total("13.37"),
        ]
        for step in steps:
            snap = step()
            expected = allocate([Member(id=m.id, hours=m.hours) for m in snap.members], snap.total)
            assert [m.amount for m in snap.members] == [m.amount for m in expected]


class TestNonFiniteInput:
    """Infinity/NaN are rejected up front and leave the session usable."""

    @pytest.mark.parametrize("value", ["Infinity", "-inf", "NaN", float("inf"), Decimal("NaN")])
    def test_total_rejected(self, manager, value):
        manager.set_total(40)
        before = manager.snapshot()
        with pytest.raises(ValueError, match="finite"):
            manager.set_total(value)
        assert manager.snapshot() is before
        assert manager.total == Decimal("40")
        m = manager.members[0]
        assert manager.patch_member(m.id, hours=2).members[0].amount == Decimal("40.00")

    @pytest.mark.parametrize("value", ["inf", "NaN", float("nan")])
    def test_hours_rejected(self, manager, value):
        m = manager.members[0]
        manager.patch_member(m.id, hours=3)
        with pytest.raises(ValueError, match="finite"):
            manager.patch_member(m.id, hours=value)
        assert manager.member(m.id).hours == Decimal("3")
        assert manager.set_total(9).members[0].amount == Decimal("9.00")

    def test_failed_allocation_keeps_previous_state(self, manager, monkeypatch):
        from split_core import roster

        manager.set_total(10)
        before = manager.snapshot()

        def boom(members, total):
            raise ArithmeticError("allocation failed")

        monkeypatch.setattr(roster, "allocate", boom)
        with pytest.raises(ArithmeticError):
            manager.set_total(20)
        with pytest.raises(ArithmeticError):
            manager.resize(6)
        monkeypatch.undo()
        assert manager.snapshot() is before
        assert manager.set_total(manager.total).total == Decimal("10")
        assert len(manager.resize(len(manager))) == 3


class TestTimeRangeInstances:
    def test_instance_is_normalized(self, manager):
        m = manager.members[0]
        manager.patch_member(m.id, time_range=TimeRange("9:00", "17:5"))
        stored = manager.member(m.id)
        assert stored.time_range == TimeRange("09:00", "17:05")
        assert stored.hours == Decimal("8.08")

    def test_invalid_instance_rejected(self, manager):
        m = manager.members[0]
        with pytest.raises(ValueError, match="Invalid time of day"):
            manager.patch_member(m.id, time_range=TimeRange("9:00", "garbage"))
        assert manager.member(m.id).time_range is None


class TestIdFactory:
    def test_exhausted_factory_raises(self):
        mgr = RosterManager(size=1, id_factory=lambda: "same")
        with pytest.raises(RuntimeError, match="no unused id"):
            mgr.resize(2)
        assert len(mgr) == 1
