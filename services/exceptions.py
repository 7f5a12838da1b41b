# -*- coding: utf-8 -*-
"""Exceptions raised by WanderCrew services."""


class WanderCrewError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    def __init__(self, message: str, context: str = None):
        super().__init__(message)
        self.message = message
        self.context = context


class ApiException(WanderCrewError):
    """The profile API answered with an error status."""

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, context: str = None):
        super().__init__(message, context)
        self.status_code = status_code
        self.response_data = response_data or {}

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ValidationException(WanderCrewError):
    """Input rejected before reaching the API (bad data, missing session)."""

    def __init__(self, message: str, field: str = None,
                 errors: list = None, context: str = None):
        super().__init__(message, context)
        self.field = field
        self.errors = errors or []


class NetworkException(WanderCrewError):
    """The API could not be reached (connection refused, timeout)."""

    def __init__(self, message: str, original_error: Exception = None,
                 context: str = None):
        super().__init__(message, context)
        self.original_error = original_error


class StorageException(WanderCrewError):
    """Local progress storage could not be read or written."""

    def __init__(self, message: str, key: str = None,
                 original_error: Exception = None):
        super().__init__(message)
        self.key = key
        self.original_error = original_error
