"""Expose Qt models used by the chat list view."""

from .chat_list_model import ChatListModel
from .roles import Roles, role_names

__all__ = [
    "ChatListModel",
    "Roles",
    "role_names",
]
