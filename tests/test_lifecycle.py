"""
Booking lifecycle state machine tests.
"""
import pytest

from dockslot.errors import InvalidTransition
from dockslot.models.booking import BookingStatus
from dockslot.services.lifecycle import (
    BookingAction,
    can_transition,
    get_allowed_actions,
    next_status,
)


class TestTransitions:
    @pytest.mark.parametrize("current,action,expected", [
        (BookingStatus.PENDING, BookingAction.APPROVE, BookingStatus.BOOKED),
        (BookingStatus.PENDING, BookingAction.REJECT, BookingStatus.REJECTED),
        (BookingStatus.PENDING, BookingAction.CANCEL, BookingStatus.CANCELLED),
        (BookingStatus.BOOKED, BookingAction.CANCEL, BookingStatus.CANCELLED),
        (BookingStatus.BOOKED, BookingAction.ENTER, BookingStatus.VEHICLE_REACHED),
        (BookingStatus.VEHICLE_REACHED, BookingAction.CANCEL, BookingStatus.CANCELLED),
        (BookingStatus.VEHICLE_REACHED, BookingAction.EXIT, BookingStatus.VEHICLE_EXITED),
    ])
    def test_allowed(self, current, action, expected):
        """Should allow each listed transition."""
        assert can_transition(current, action) is True
        assert next_status(current, action) == expected

    def test_booked_cannot_be_rejected(self):
        """Should refuse rejecting a booked booking and list the allowed actions."""
        with pytest.raises(InvalidTransition) as exc:
            next_status(BookingStatus.BOOKED, BookingAction.REJECT)
        assert exc.value.current_status == BookingStatus.BOOKED
        assert exc.value.action == BookingAction.REJECT
        assert "Allowed actions: cancel, enter" in exc.value.message

    def test_pending_cannot_enter(self):
        """Should not let a pending booking enter."""
        assert can_transition(BookingStatus.PENDING, BookingAction.ENTER) is False


class TestTerminalStates:
    @pytest.mark.parametrize("status", BookingStatus.terminal())
    def test_no_way_out(self, status):
        """Should allow no action from a terminal status."""
        assert get_allowed_actions(status) == []
        with pytest.raises(InvalidTransition, match="terminal state"):
            next_status(status, BookingAction.CANCEL)

    def test_every_status_is_reachable(self):
        """Should reach every status from the initial one."""
        targets = {next_status(s, a) for s in BookingStatus.all() for a in get_allowed_actions(s)}
        assert targets | {BookingStatus.PENDING} == set(BookingStatus.all())
