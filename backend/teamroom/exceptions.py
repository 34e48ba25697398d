"""Room errors.

Raised by the room manager and translated into JSON responses by the API
layer. None of them leave the manager in a broken state.
"""


class TeamRoomException(Exception):
    """Base class for every room error."""
    status_code = 400


class RoomBusy(TeamRoomException):
    """A game is in progress; joins are closed until the room resets."""
    def __init__(self, game_number):
        self.game_number = game_number
        super().__init__(f"Game #{game_number} is in progress, try again shortly")


class InvalidArgument(TeamRoomException):
    """A required field is missing or empty."""
    def __init__(self, field):
        self.field = field
        super().__init__(f"{field} is required")
