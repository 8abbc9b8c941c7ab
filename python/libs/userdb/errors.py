"""Error kinds raised by the store layer and the request pipeline."""

from __future__ import annotations


class OperationError(Exception):
    """Base error; ``status_code`` is the HTTP status it is reported with."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class DecodeError(OperationError):
    status_code = 400


class ValidationError(OperationError):
    status_code = 400


class StoreError(OperationError):
    status_code = 500


class StoreUnavailable(StoreError):
    """The database could not be reached at startup."""


class NotFoundError(OperationError):
    status_code = 404

    def __init__(self, detail: str = "User with specified ID not found!") -> None:
        super().__init__(detail)
