"""
Booking lifecycle state machine.

All booking status changes go through this table. Actions are named so
refusals can say what was attempted, not only which status was targeted.

    Approval Pending --approve--> Booked
    Approval Pending --reject---> Rejected           (terminal)
    Approval Pending --cancel---> Cancelled          (terminal)
    Booked ----------cancel-----> Cancelled          (terminal)
    Booked ----------enter------> Vehicle Reached
    Vehicle Reached -cancel-----> Cancelled          (terminal)
    Vehicle Reached -exit-------> Vehicle Exited     (terminal)
"""
from dockslot.errors import InvalidTransition
from dockslot.models.booking import BookingStatus


class BookingAction:
    CREATE = "create"
    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    ENTER = "enter"
    EXIT = "exit"


# (current_status, action) -> next_status
BOOKING_TRANSITIONS: dict[tuple[str, str], str] = {
    (BookingStatus.PENDING, BookingAction.APPROVE): BookingStatus.BOOKED,
    (BookingStatus.PENDING, BookingAction.REJECT): BookingStatus.REJECTED,
    (BookingStatus.PENDING, BookingAction.CANCEL): BookingStatus.CANCELLED,
    (BookingStatus.BOOKED, BookingAction.CANCEL): BookingStatus.CANCELLED,
    (BookingStatus.BOOKED, BookingAction.ENTER): BookingStatus.VEHICLE_REACHED,
    (BookingStatus.VEHICLE_REACHED, BookingAction.CANCEL): BookingStatus.CANCELLED,
    (BookingStatus.VEHICLE_REACHED, BookingAction.EXIT): BookingStatus.VEHICLE_EXITED,
}


def can_transition(current_status: str, action: str) -> bool:
    return (current_status, action) in BOOKING_TRANSITIONS


def get_allowed_actions(current_status: str) -> list[str]:
    """Actions available from a status, in table order."""
    return [action for (status, action) in BOOKING_TRANSITIONS if status == current_status]


def next_status(current_status: str, action: str) -> str:
    """
    Resolve the status an action leads to. Raises InvalidTransition if the
    action is not allowed from current_status.
    """
    target = BOOKING_TRANSITIONS.get((current_status, action))
    if target is not None:
        return target

    allowed = get_allowed_actions(current_status)
    if not allowed:
        raise InvalidTransition(
            current_status, action,
            f"Booking in '{current_status}' status cannot be modified. This is a terminal state.",
        )
    raise InvalidTransition(
        current_status, action,
        f"Cannot {action} a booking in '{current_status}' status. "
        f"Allowed actions: {', '.join(allowed)}",
    )
