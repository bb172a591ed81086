"""Domain errors raised by the game services.

Each error carries the HTTP status the API layer responds with, so routes
can let them propagate to the handler registered in ``create_app``.
"""


class GuessFastError(Exception):
    status_code = 400
    message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message, 'code': type(self).__name__}


class InvalidRequest(GuessFastError):
    message = 'Invalid request'


class InvalidLength(GuessFastError):
    message = 'Guess must be exactly 5 letters'


class RunNotFound(GuessFastError):
    status_code = 404
    message = 'Run not found'


class RunTerminated(GuessFastError):
    status_code = 409
    message = 'Run is already finished'


class TournamentNotFound(GuessFastError):
    status_code = 404
    message = 'Tournament not found'


class TournamentClosed(GuessFastError):
    message = 'Tournament ended'


class TournamentExists(GuessFastError):
    status_code = 409
    message = 'Tournament already exists'


class StoreUnavailable(GuessFastError):
    status_code = 503
    message = 'Database error'
