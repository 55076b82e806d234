"""
Tests for the shift lifecycle: start, join, leave, end.
"""

import asyncio

from wardshift.models.events import EventType


def test_start_shift_creates_active_shift(workspace, clock):
    outcome = asyncio.run(workspace.shifts.start_shift("  Quiet night  "))
    shift = outcome.value

    assert outcome.changed
    assert shift.is_active
    assert shift.user_name == "Dr. Jane Carter"
    assert shift.team_members == ["Dr. Jane Carter"]
    assert shift.start_time == clock.now
    assert shift.notes == "Quiet night"
    assert shift.id.startswith("shift_")
    assert workspace.state.get_current_shift() == shift

    logs = workspace.state.get_activity_logs()
    assert len(logs) == 1
    assert logs[0].description == "Started shift"
    assert logs[0].type == "shift_started"


def test_start_shift_snapshots_bed_ledger(workspace):
    shift = asyncio.run(workspace.shifts.start_shift()).value
    departments = [status.department for status in shift.bed_statuses]
    assert departments == list(workspace.bed_ledger.capacities)


def test_start_shift_while_active_is_noop(workspace):
    first = asyncio.run(workspace.shifts.start_shift()).value
    second = asyncio.run(workspace.shifts.start_shift())

    assert not second.changed
    assert second.value.id == first.id
    assert len(workspace.state.get_activity_logs()) == 1


def test_join_and_leave(workspace):
    shift = asyncio.run(workspace.shifts.start_shift()).value

    joined = asyncio.run(workspace.shifts.join_shift(shift.id, "Nurse Sarah Johnson"))
    assert joined.value.team_members == ["Dr. Jane Carter", "Nurse Sarah Johnson"]
    assert joined.activity.description == "Nurse Sarah Johnson joined the shift"

    left = asyncio.run(workspace.shifts.leave_shift(shift.id, "Nurse Sarah Johnson"))
    assert left.value.team_members == ["Dr. Jane Carter"]
    assert left.activity.description == "Nurse Sarah Johnson left the shift"
    assert workspace.state.get_current_shift().team_members == ["Dr. Jane Carter"]


def test_join_twice_keeps_single_membership(workspace):
    shift = asyncio.run(workspace.shifts.start_shift()).value
    asyncio.run(workspace.shifts.join_shift(shift.id, "Dr. Mike Wilson"))
    again = asyncio.run(workspace.shifts.join_shift(shift.id, "Dr. Mike Wilson"))

    assert not again.changed
    members = workspace.state.get_current_shift().team_members
    assert members.count("Dr. Mike Wilson") == 1
    assert len(workspace.state.get_activity_logs()) == 2


def test_leave_when_not_member_is_noop(workspace):
    shift = asyncio.run(workspace.shifts.start_shift()).value
    outcome = asyncio.run(workspace.shifts.leave_shift(shift.id, "Somebody Else"))
    assert not outcome.changed
    assert len(workspace.state.get_activity_logs()) == 1


def test_mismatched_shift_id_changes_nothing(workspace):
    shift = asyncio.run(workspace.shifts.start_shift()).value

    for operation in (
        workspace.shifts.join_shift("shift_other", "Dr. Mike Wilson"),
        workspace.shifts.leave_shift("shift_other", "Dr. Jane Carter"),
        workspace.shifts.end_shift("shift_other"),
    ):
        assert not asyncio.run(operation).changed

    assert workspace.state.get_current_shift() == shift
    assert len(workspace.state.get_activity_logs()) == 1


def test_end_shift_clears_current(workspace):
    shift = asyncio.run(workspace.shifts.start_shift()).value
    outcome = asyncio.run(workspace.shifts.end_shift(shift.id))

    assert outcome.changed
    assert outcome.value.is_active is False
    assert workspace.state.get_current_shift() is None
    assert workspace.state.get_activity_logs()[0].description == "Ended shift"


def test_operations_without_shift_are_noops(workspace):
    assert not asyncio.run(workspace.shifts.join_shift("shift_x", "A")).changed
    assert not asyncio.run(workspace.shifts.end_shift("shift_x")).changed
    assert workspace.state.get_activity_logs() == []


def test_shift_changes_are_published(workspace):
    received = []

    async def listener(event):
        received.append(event)

    workspace.event_bus.subscribe(EventType.SHIFT_CHANGED, listener)

    shift = asyncio.run(workspace.shifts.start_shift()).value
    asyncio.run(workspace.shifts.end_shift(shift.id))

    assert [e.payload["action"] for e in received] == ["started", "ended"]
    assert all(e.correlation_id == shift.id for e in received)
