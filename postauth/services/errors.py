class ApiError(Exception):
    """Expected rejection, rendered as {"success": false, "message": ...}."""

    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class AccountNotFound(NotFound):
    message = "User does not exist!"


class PostNotFound(NotFound):
    message = "Post not found!"


class AlreadyExists(ApiError):
    status_code = 409
    message = "User already exists!"


class AlreadyVerified(ApiError):
    message = "User already verified!"


class InvalidCredentials(ApiError):
    status_code = 401
    message = "Invalid credentials!"


class InvalidSession(ApiError):
    status_code = 401
    message = "Session expired or invalid"


class NotAuthenticated(ApiError):
    status_code = 403
    message = "User is Unauthorized"


class Unauthorized(ApiError):
    status_code = 403
    message = "Unauthorized!"


class NotVerified(Unauthorized):
    message = "You are not a verified user!"


class CodeError(ApiError):
    message = "Invalid code!"


class NoPendingCode(CodeError):
    message = "No code has been requested for this account!"


class CodeExpired(CodeError):
    message = "Code expired please try again!"


class CodeMismatch(CodeError):
    message = "Invalid code!"


class DeliveryFailed(ApiError):
    message = "Code sending failed!"


class ConcurrentUpdate(ApiError):
    status_code = 409
    message = "Account was modified by another request, please retry"
