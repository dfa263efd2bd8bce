# -*- coding: utf-8 -*-
"""Error kinds raised by the repositories.

They subclass FastAPI's ``HTTPException`` so a router can let them propagate and
the client still receives the matching status code with the message as detail.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConsistencyError(BadRequestError):
    """Two referenced records do not belong to the same restaurant."""


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


__all__ = ["AppError", "NotFoundError", "BadRequestError", "ConsistencyError", "UnauthorizedError"]
