"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from loguru import logger


class FlashcardsException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(FlashcardsException):
    """Data validation errors."""
    pass


class NoWordsAvailable(FlashcardsException):
    """The vocabulary store has no entries to review."""

    def __init__(self, message: str = "No words available for review", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidReference(FlashcardsException):
    """A write referenced a vocabulary entry that does not exist."""
    pass


class StoreError(FlashcardsException):
    """Transient store or connectivity failure."""
    pass


class ReadFailed(StoreError):
    """A store read failed."""
    pass


class WriteFailed(StoreError):
    """A store write failed."""
    pass


class Unauthorized(FlashcardsException):
    """A request arrived without a valid identity or credentials."""
    pass


class DuplicateAccount(FlashcardsException):
    """Registration used an email that already has an account."""
    pass


def handle_no_words(error: NoWordsAvailable) -> HTTPException:
    """Handle an empty vocabulary store."""
    logger.info(f"No words available: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message
    )


def handle_invalid_reference(error: InvalidReference) -> HTTPException:
    """Handle writes that point at a missing vocabulary entry."""
    logger.bind(**error.details).error(f"Invalid reference: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message
    )


def handle_store_error(error: StoreError) -> HTTPException:
    """Handle store errors and return appropriate HTTP response."""
    logger.bind(**error.details).error(f"Store error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Database operation failed. Please try again later."
    )


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_unauthorized(error: Unauthorized) -> HTTPException:
    """Handle writes attempted without an identity."""
    logger.warning(f"Unauthorized: {error.message}")
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def handle_duplicate_account(error: DuplicateAccount) -> HTTPException:
    """Handle registration with an email that is already taken."""
    logger.info(f"Duplicate account: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message
    )


def to_http_exception(error: FlashcardsException) -> HTTPException:
    """Map any application error onto its HTTP response."""
    if isinstance(error, NoWordsAvailable):
        return handle_no_words(error)
    if isinstance(error, InvalidReference):
        return handle_invalid_reference(error)
    if isinstance(error, StoreError):
        return handle_store_error(error)
    if isinstance(error, ValidationError):
        return handle_validation_error(error)
    if isinstance(error, DuplicateAccount):
        return handle_duplicate_account(error)
    if isinstance(error, Unauthorized):
        return handle_unauthorized(error)
    logger.error(f"Unhandled application error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error.message
    )
