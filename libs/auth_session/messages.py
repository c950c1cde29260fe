"""User-facing authentication messages.

Messages never include internal error detail.
"""

INVALID_PASSWORD = "Invalid password. Please try again."
SERVICE_UNAVAILABLE = "Service temporarily unavailable. Please try again in a few moments."
IDP_UNAVAILABLE = "Authentication service is temporarily unavailable. Please try again later."
IDP_ERROR = "Sign in was not completed by the identity provider. Please try again."
AUTHENTICATION_FAILED = "Authentication failed. Please try again."
INVALID_AUTHENTICATION_RESPONSE = "Invalid authentication response. Please try again."
AUTHENTICATION_REQUEST_EXPIRED = "Authentication request expired. Please try again."

ERROR_PAGE_TITLE = "There was a problem signing you in"
SIGN_IN_PAGE_TITLE = "Sign in"
DEFAULT_ERROR = "Something went wrong while signing you in. Please try again."

DISPLAYABLE_ERRORS = frozenset(
    {
        INVALID_PASSWORD,
        SERVICE_UNAVAILABLE,
        IDP_UNAVAILABLE,
        IDP_ERROR,
        AUTHENTICATION_FAILED,
        INVALID_AUTHENTICATION_RESPONSE,
        AUTHENTICATION_REQUEST_EXPIRED,
    }
)
