"""Error taxonomy shared by every component.

Each error carries the HTTP status it maps to; ``main`` turns any
``MarketError`` into a ``{"detail": message}`` JSON body.
"""


class MarketError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MarketError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(MarketError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidToken(Unauthorized):
    default_message = "Invalid token"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid credentials"


class Forbidden(MarketError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(MarketError):
    status_code = 404
    default_message = "Not found"


class ProductNotFound(NotFound):
    default_message = "Product not found"


class Conflict(MarketError):
    status_code = 409
    default_message = "Conflict"


class DuplicateEmail(Conflict):
    # registration has always answered 400 for this
    status_code = 400
    default_message = "Email already exists"


class InternalFailure(MarketError):
    status_code = 500
    default_message = "Internal failure"


class CheckoutFailed(InternalFailure):
    default_message = "Checkout failed"
