class ApiError(Exception):
    """Base for errors that are reported to the client as JSON."""

    status_code = 400
    message = 'Bad request'

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.errors = errors

    def to_dict(self):
        body = {'message': self.message}
        if self.errors:
            body['errors'] = self.errors
        return body


class ValidationFailed(ApiError):
    message = 'Invalid data'


class CredentialInUse(ApiError):
    message = 'Private key is already in use'


class InvalidCredential(ApiError):
    status_code = 401
    message = 'Invalid private key'


class UnknownUser(ApiError):
    status_code = 401
    message = 'User not found'


class HandleNotFound(ApiError):
    message = 'Wey ID not found'


class ContactExists(ApiError):
    message = 'Contact already exists'
