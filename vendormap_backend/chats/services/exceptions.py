# chats/services/exceptions.py


class ChatError(Exception):
    """Base exception for chat domain errors."""


class VendorWithoutOwnerError(ChatError):
    """Raised when a chat is requested with a vendor that has no owning user."""


class SelfChatError(ChatError):
    """Raised when a vendor owner tries to open a chat with their own vendor."""
