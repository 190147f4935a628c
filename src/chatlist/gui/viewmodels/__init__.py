from chatlist.core.pagination import PageFetcher
from chatlist.core.signal import ObservableProperty, Signal

from .base import BaseViewModel
from .chat_list_viewmodel import ChatListViewModel, RenderedRow
from .protocols import Renderer, ScrollHost

__all__ = [
    "BaseViewModel",
    "ChatListViewModel",
    "ObservableProperty",
    "PageFetcher",
    "RenderedRow",
    "Renderer",
    "ScrollHost",
    "Signal",
]
