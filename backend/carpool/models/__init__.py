from carpool.models.profile import Profile
from carpool.models.ride import Ride
from carpool.models.booking import TripBooking
from carpool.models.conversation import Conversation, Message
from carpool.models.block import UserBlock
from carpool.models.review import Review
from carpool.models.vehicle import Vehicle

__all__ = ["Profile", "Ride", "TripBooking", "Conversation", "Message", "UserBlock", "Review", "Vehicle"]
