from fastapi import HTTPException, status
from wall.core import messages


class WallError(HTTPException):
    """Base for failures surfaced to API callers as a status code plus message"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, headers: dict | None = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class ConflictError(WallError):
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(WallError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = messages.NOT_AUTHENTICATED):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(WallError):
    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(WallError):
    status_code = status.HTTP_400_BAD_REQUEST
