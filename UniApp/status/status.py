"""Status definitions and exceptions for UniApp.

This module provides:
    - Status: enumeration of possible failure states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., IoException) raised by the ingestion, price and config services
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Ledger file status
    IoError = enum.auto()
    ParseError = enum.auto()

    # Price service status
    NetworkError = enum.auto()

    # Configuration status
    ConfigWriteError = enum.auto()

    # Programming errors
    ContractViolation = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status.',
    Status.Okay: 'Everything is okay.',

    Status.IoError: 'Could not read the file.',
    Status.ParseError: 'The data could not be parsed.',

    Status.NetworkError: 'Could not reach the price service. Please check your connection.',

    Status.ConfigWriteError: 'Could not save the configuration.',

    Status.ContractViolation: 'Invalid operation.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in UniApp.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.
        detail (str): The additional context passed at construction, if any.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        self.detail = message or ''
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)


class UnknownException(BaseStatusException):
    """Exception for an unexpected error caught at a worker boundary."""
    pass


class IoException(BaseStatusException):
    """Exception raised when a file cannot be read (missing, not a file, no permission)."""
    status = Status.IoError


class ParseException(BaseStatusException):
    """Exception raised when JSON is malformed or does not match the expected shape."""
    status = Status.ParseError


class NetworkException(BaseStatusException):
    """Exception raised when the price service request fails at the transport level."""
    status = Status.NetworkError


class ConfigWriteException(BaseStatusException):
    """Exception raised when a configuration field cannot be persisted."""
    status = Status.ConfigWriteError


class ContractViolationException(BaseStatusException):
    """Exception raised when an operation is called with its precondition unmet."""
    status = Status.ContractViolation
