# errors.py
# Exceptions raised by the jury services and rendered as JSON by the app

import logging
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class JuryError(Exception):
    """Base error. Carries the HTTP status and a machine-readable code."""

    status_code = 400
    error = 'Bad Request'
    code = 'BAD_REQUEST'

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        result = {
            'success': False,
            'error': self.error,
            'message': self.message,
            'code': self.code,
        }
        if self.details:
            result['details'] = self.details
        return result


class InvalidScore(JuryError):
    error = 'Invalid Score'
    code = 'INVALID_SCORE'

    def __init__(self, criterion=None, field=None, min_score=None, max_score=None, value=None, message=None):
        if message is None:
            message = f'{criterion} score must be between {min_score:g}-{max_score:g}'
        details = None
        # Errors about the payload as a whole are not tied to a criterion
        if criterion is not None:
            details = {
                'criterion': criterion,
                'field': field,
                'min': min_score,
                'max': max_score,
                'value': value,
            }
        super().__init__(message, details=details)
        self.criterion = criterion
        self.field = field
        self.min_score = min_score
        self.max_score = max_score


class InvalidFilter(JuryError):
    error = 'Invalid Filter'
    code = 'INVALID_FILTER'


class NotFound(JuryError):
    status_code = 404
    error = 'Not Found'
    code = 'NOT_FOUND'

    def __init__(self, resource, identifier=None, message=None):
        if message is None:
            message = f'{resource} not found'
            if identifier is not None:
                message = f"{resource} '{identifier}' not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class AlreadyJuryMember(JuryError):
    status_code = 409
    error = 'Conflict'
    code = 'ALREADY_JURY_MEMBER'


class AuthRequired(JuryError):
    status_code = 401
    error = 'Unauthorized'
    code = 'AUTH_REQUIRED'

    def __init__(self, message='Authentication required'):
        super().__init__(message)


class Forbidden(JuryError):
    status_code = 403
    error = 'Forbidden'
    code = 'FORBIDDEN'


class PersistenceFailure(JuryError):
    """Storage failed. Every write path is an idempotent recompute, so retrying is safe."""

    status_code = 500
    error = 'Persistence Failure'
    code = 'PERSISTENCE_FAILURE'


def get_json_object(error=None):
    """
    Returns the request body as a dict. A missing or unparsable body counts
    as empty; any other JSON value (list, string, number) raises ``error``,
    an InvalidFilter by default.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise error or InvalidFilter('Request body must be a JSON object')
    return data


def register_error_handlers(app):
    @app.errorhandler(JuryError)
    def handle_jury_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({
            'success': False,
            'error': e.name,
            'message': e.description,
            'code': e.name.upper().replace(' ', '_'),
        }), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception('Unhandled error: %s', e)
        return jsonify({
            'success': False,
            'error': 'Internal Error',
            'message': 'An internal error occurred',
            'code': 'INTERNAL_ERROR',
        }), 500
