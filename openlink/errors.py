"""Error taxonomy shared by services, stores and blueprints.

Every error maps to one HTTP status. ``create_app`` registers a single
handler for ``OpenLinkError`` that renders ``{'error': ..., 'redirect': ...}``.
"""


class OpenLinkError(Exception):
    status_code = 500
    redirect = None

    def __init__(self, message, redirect=None):
        self.message = message
        if redirect is not None:
            self.redirect = redirect
        super().__init__(message)

    def to_dict(self):
        data = {'error': self.message}
        if self.redirect:
            data['redirect'] = self.redirect
        return data


class ValidationError(OpenLinkError):
    """Bad input: username format, reserved word, unknown field, bad index."""
    status_code = 400


class ConflictError(OpenLinkError):
    """Username already taken, or already claimed."""
    status_code = 409


class NotFoundError(OpenLinkError):
    status_code = 404


class AuthorizationError(OpenLinkError):
    """No authenticated owner on a protected action."""
    status_code = 401
    redirect = '/login'


class CreationError(OpenLinkError):
    """A link could not be created because the owner's profile is missing.

    Not transient: callers surface it and do not retry.
    """
    status_code = 422


class PersistenceError(OpenLinkError):
    """A store write failed."""
    status_code = 500
