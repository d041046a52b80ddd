"""Message text sent to the other participant when a booking changes."""

from datetime import date, datetime, time
from typing import Optional

from carpool.domain.booking_state import BookingAction, BookingStatus, ParticipantRole


def format_pickup_time(value: Optional[datetime]) -> str:
    """Render like 'Mar 5, 2026, 9:30 AM'; empty when unknown."""
    if value is None:
        return ""
    clock = value.strftime("%I:%M %p").lstrip("0")
    return f"{value.strftime('%b')} {value.day}, {value.year}, {clock}"


def participant_name(profile, fallback: str) -> str:
    if profile is None:
        return fallback
    return profile.display_name or fallback


def ride_label(ride) -> str:
    return ride.label if ride is not None else "the trip"


def _pickup_suffix(booking) -> str:
    return f"Pickup: {booking.pickup_location or 'TBD'} {format_pickup_time(booking.pickup_time)}".rstrip()


def build_booking_response_message(
    booking,
    role: ParticipantRole,
    action: BookingAction,
    previous_status: BookingStatus,
) -> str:
    """Text for an approve/deny/cancel answer, from the caller's point of view."""
    label = ride_label(booking.ride)
    passenger = participant_name(booking.passenger, "Passenger")
    driver = participant_name(booking.driver, "Driver")

    if role == ParticipantRole.DRIVER:
        if action == BookingAction.APPROVE:
            return f"I confirmed {passenger} for {label}. {_pickup_suffix(booking)}"
        if action == BookingAction.DENY:
            if previous_status == BookingStatus.INVITED:
                return f"I cancelled the invitation to {passenger} for {label}."
            return f"I declined the request from {passenger} for {label}."
    else:
        if action == BookingAction.CANCEL:
            return f"I cancelled my request for {label}. {_pickup_suffix(booking)}"
        if action == BookingAction.APPROVE:
            return f"I accepted the invite from {driver} for {label}. {_pickup_suffix(booking)}"
        if action == BookingAction.DENY:
            return f"I declined the invitation from {driver} for {label}."
    return ""


def build_booking_request_message(
    passenger_name: str,
    ride,
    pickup_date: date,
    pickup_time: time,
    notes: Optional[str] = None,
) -> str:
    suffix = f' They wrote: "{notes}".' if notes else ""
    return (
        f"{passenger_name} just requested to join {ride.label} "
        f"on {pickup_date.isoformat()} at {pickup_time.strftime('%H:%M')}.{suffix}"
    )


def build_invitation_message(driver_name: str, ride, notes: Optional[str] = None) -> str:
    suffix = f' Note: "{notes}".' if notes else ""
    return (
        f"{driver_name} invited you to join the ride ({ride.label}) "
        f"on {ride.departure_date.isoformat()} at {ride.departure_time.strftime('%H:%M')}.{suffix}"
    )
