"""Errors raised while ingesting league data."""


class LeagueDataError(ValueError):
    """Base class for rejected league input."""


class MalformedMatchError(LeagueDataError):
    """A match record that cannot be folded into standings."""

    def __init__(self, match_id: str, reason: str):
        self.match_id = match_id
        self.reason = reason
        super().__init__(f"Match '{match_id}' is malformed: {reason}")


class MalformedSignupError(LeagueDataError):
    """A signup that cannot be placed in a game's queue."""

    def __init__(self, signup_id: str, reason: str):
        self.signup_id = signup_id
        self.reason = reason
        super().__init__(f"Signup '{signup_id}' is malformed: {reason}")


class MalformedGameError(LeagueDataError):
    """A scheduled game whose capacity cannot be determined."""

    def __init__(self, game_id: str, reason: str):
        self.game_id = game_id
        self.reason = reason
        super().__init__(f"Game '{game_id}' is malformed: {reason}")
