"""Core application data models exposed as a flat module-level API."""

from .chat import Chat, Message
from .expense import ExpenseGroup, ExpenseParticipant, Settlement
from .listing import Listing, ListingImage
from .match import UserMatch
from .photo import RoomPhoto
from .user import User

__all__ = [
    "User",
    "UserMatch",
    "RoomPhoto",
    "Listing",
    "ListingImage",
    "Chat",
    "Message",
    "ExpenseGroup",
    "ExpenseParticipant",
    "Settlement",
]
