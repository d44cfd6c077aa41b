"""Domain enums."""

from enum import Enum


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ActorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class ReinitPolicy(str, Enum):
    OVERWRITE = "overwrite"
    REJECT = "reject"


class HistoryCheck(str, Enum):
    BEFORE_APPEND = "before_append"
    AFTER_APPEND = "after_append"


class BootstrapReply(str, Enum):
    WITHHOLD = "withhold"
    PERSIST = "persist"
