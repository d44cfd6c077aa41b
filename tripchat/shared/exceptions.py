"""Shared (non-domain) exceptions."""


class TripChatError(Exception):
    """Base error for the trip conversation core."""


class ValidationError(TripChatError):
    """Caller input is missing or malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class GenerationError(TripChatError):
    """Text generation backend failed."""


class ActorInitError(TripChatError):
    """Trip actor could not persist its definition."""


class AlreadyInitializedError(ActorInitError):
    """Trip actor already holds a definition and re-init is rejected."""

    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"trip already initialized: {trip_id}")


class PersistenceError(TripChatError):
    """Conversation log store write or read failed."""


class TripNotFoundError(TripChatError):
    """Trip actor has no state for the requested identifier."""

    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"trip not initialized: {trip_id}")
