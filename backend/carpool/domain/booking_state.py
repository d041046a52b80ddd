"""
Booking state machine.

A booking is created as `pending` (passenger asked to join) or `invited`
(driver offered a seat). The participants move it to `confirmed` or
`cancelled`; `completed` is set by the ride lifecycle, never here.

The transition table is keyed by (caller role, current status, action) and
each entry also says what happens to the ride's seat counter:

    RESERVE  the seat is taken now (driver approving a request)
    RELEASE  a seat reserved at invitation time is handed back
    NONE     nothing to do (invitations already hold their seat,
             pending requests never held one)
"""

import enum
import uuid
from dataclasses import dataclass

from carpool.core.exceptions import AuthorizationError, InvalidBookingAction


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    INVITED = "invited"


class BookingAction(str, enum.Enum):
    APPROVE = "approve"
    DENY = "deny"
    CANCEL = "cancel"


class ParticipantRole(str, enum.Enum):
    DRIVER = "driver"
    PASSENGER = "passenger"


class SeatEffect(str, enum.Enum):
    RESERVE = "reserve"
    RELEASE = "release"
    NONE = "none"


TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})


@dataclass(frozen=True)
class Transition:
    next_status: BookingStatus
    seat_effect: SeatEffect


_D, _P = ParticipantRole.DRIVER, ParticipantRole.PASSENGER

BOOKING_TRANSITIONS: dict[tuple[ParticipantRole, BookingStatus, BookingAction], Transition] = {
    # Driver answering a passenger's request
    (_D, BookingStatus.PENDING, BookingAction.APPROVE): Transition(BookingStatus.CONFIRMED, SeatEffect.RESERVE),
    (_D, BookingStatus.PENDING, BookingAction.DENY): Transition(BookingStatus.CANCELLED, SeatEffect.NONE),
    # Driver withdrawing their own invitation
    (_D, BookingStatus.INVITED, BookingAction.DENY): Transition(BookingStatus.CANCELLED, SeatEffect.RELEASE),
    # Passenger answering an invitation
    (_P, BookingStatus.INVITED, BookingAction.APPROVE): Transition(BookingStatus.CONFIRMED, SeatEffect.NONE),
    (_P, BookingStatus.INVITED, BookingAction.DENY): Transition(BookingStatus.CANCELLED, SeatEffect.RELEASE),
    # Passenger withdrawing their own request
    (_P, BookingStatus.PENDING, BookingAction.CANCEL): Transition(BookingStatus.CANCELLED, SeatEffect.NONE),
}


def resolve_role(driver_id: uuid.UUID, passenger_id: uuid.UUID, user_id: uuid.UUID) -> ParticipantRole:
    """Role of `user_id` in a booking. Raises 403 for outsiders."""
    if driver_id == user_id:
        return ParticipantRole.DRIVER
    if passenger_id == user_id:
        return ParticipantRole.PASSENGER
    raise AuthorizationError("Not authorized to modify this booking")


def resolve_transition(role: ParticipantRole, status: str, action: str) -> Transition:
    """Look up the transition for (role, status, action) or raise InvalidBookingAction."""
    try:
        key = (ParticipantRole(role), BookingStatus(status), BookingAction(action))
    except ValueError:
        raise InvalidBookingAction()

    transition = BOOKING_TRANSITIONS.get(key)
    if transition is None:
        raise InvalidBookingAction()
    return transition
