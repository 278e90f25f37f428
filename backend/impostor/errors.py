"""Error taxonomy for game commands.

Every failure a command can produce is a ``GameError`` subclass. They are
raised by the engines in ``impostor.services`` and rendered to JSON by the
error handler installed in ``create_app``.
"""


class GameError(Exception):
    status_code = 400
    code = 'game_error'
    default_message = 'Game error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class NotFound(GameError):
    status_code = 404
    code = 'not_found'
    default_message = 'Not found'


class InvalidPhase(GameError):
    status_code = 409
    code = 'invalid_phase'
    default_message = 'Operation not allowed in the current phase'


class Forbidden(GameError):
    status_code = 403
    code = 'forbidden'
    default_message = 'Only the host may do that'


class NotYourTurn(GameError):
    status_code = 409
    code = 'not_your_turn'
    default_message = 'Not your turn to submit a response'


class InsufficientPlayers(GameError):
    status_code = 400
    code = 'insufficient_players'
    default_message = 'Not enough players'


class NoVotesCast(GameError):
    status_code = 400
    code = 'no_votes_cast'
    default_message = 'No votes were cast'


class Conflict(GameError):
    status_code = 409
    code = 'conflict'
    default_message = 'Room changed concurrently, retry the command'


class BadRequest(GameError):
    status_code = 400
    code = 'bad_request'
    default_message = 'Malformed request'

    @classmethod
    def from_validation_error(cls, exc):
        fields = sorted({'.'.join(str(p) for p in err['loc']) or 'body' for err in exc.errors()})
        return cls(f"Invalid or missing fields: {', '.join(fields)}")
