from fastapi import status


class APIError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class CouponNotFound(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Coupon not found"
        )


class InvalidCredentials(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Invalid username or password"
        )


class AuthError(APIError):
    """Missing, malformed or rejected bearer token."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message
        )


class InvalidToken(Exception):
    """Raised by the token decoder; translated to AuthError at the HTTP edge."""


class StorageError(APIError):
    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message
        )
