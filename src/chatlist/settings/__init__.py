from .manager import ChatListOptions, OptionsManager
from .schema import DEFAULT_OPTIONS, OPTIONS_SCHEMA, merge_with_defaults, validate_options

__all__ = [
    "ChatListOptions",
    "DEFAULT_OPTIONS",
    "OPTIONS_SCHEMA",
    "OptionsManager",
    "merge_with_defaults",
    "validate_options",
]
