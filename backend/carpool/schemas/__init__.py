from carpool.schemas.booking import (
    BookingCreate, InvitationCreate, BookingActionRequest, BookingActionResponse, BookingResponse,
)
from carpool.schemas.ride import RideCreate, RideUpdate, RideResponse, RideListResponse, RideDeletedResponse
from carpool.schemas.message import (
    MessageCreate, MessageResponse, MessageSentResponse, ConversationResponse, ConversationMessagesResponse,
)
from carpool.schemas.profile import ProfileUpdate, ProfileResponse, BlockRequest, BlockResponse, UnblockResponse
from carpool.schemas.review import ReviewCreate, ReviewResponse
from carpool.schemas.vehicle import VehicleCreate, VehicleResponse

__all__ = [
    "BookingCreate", "InvitationCreate", "BookingActionRequest", "BookingActionResponse", "BookingResponse",
    "RideCreate", "RideUpdate", "RideResponse", "RideListResponse", "RideDeletedResponse",
    "MessageCreate", "MessageResponse", "MessageSentResponse", "ConversationResponse",
    "ConversationMessagesResponse",
    "ProfileUpdate", "ProfileResponse", "BlockRequest", "BlockResponse", "UnblockResponse",
    "ReviewCreate", "ReviewResponse",
    "VehicleCreate", "VehicleResponse",
]
