from fastapi import HTTPException, status


class BadRequestException(HTTPException):
    """Missing or malformed request input (400)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class NotFoundException(HTTPException):
    """Resource not found exception (404)."""

    def __init__(self, detail: str = "Task not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class OperationFailedException(HTTPException):
    """A store operation failed and was rolled back (500)."""

    def __init__(self, detail: str = "Error, try again"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
