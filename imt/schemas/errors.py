"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for the incremental Merkle tree library.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the library."""

    # Input validation
    PARAMETER_ERROR = "PARAMETER_ERROR"

    # Tree state
    CAPACITY_ERROR = "CAPACITY_ERROR"
    RANGE_ERROR = "RANGE_ERROR"
    STATE_ERROR = "STATE_ERROR"

    # Proofs & serialized trees
    STRUCTURAL_ERROR = "STRUCTURAL_ERROR"
    DECODE_ERROR = "DECODE_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class IMTError(BaseModel):
    """
    Error model for structured error communication.

    Used by the HTTP and CLI layers to report failures without
    passing exception objects around.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.PARAMETER_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "IMTException":
        """Convert this error model to the matching exception."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_type is None:
            return IMTException(
                message=self.message,
                code=self.code,
                details=self.details,
                retryable=self.retryable,
            )
        exc = exc_type(self.message)
        exc.details = dict(self.details)
        return exc


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class IMTException(Exception):
    """
    Base exception for all incremental Merkle tree errors.

    Carries structured error information and can be converted
    to an IMTError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "IMT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> IMTError:
        """Convert this exception to an IMTError model."""
        return IMTError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ParameterError(IMTException, TypeError):
    """A required input is missing or of the wrong kind."""

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if parameter:
            full_details["parameter"] = parameter
        super().__init__(
            message=message,
            code=ErrorCodes.PARAMETER_ERROR,
            details=full_details,
        )


class CapacityError(IMTException):
    """Insertion attempted into a full fixed-depth tree."""

    def __init__(
        self,
        message: str,
        capacity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if capacity is not None:
            full_details["capacity"] = capacity
        super().__init__(
            message=message,
            code=ErrorCodes.CAPACITY_ERROR,
            details=full_details,
        )


class RangeError(IMTException, IndexError):
    """A leaf index lies outside ``[0, size)``."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        size: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        if size is not None:
            full_details["size"] = size
        super().__init__(
            message=message,
            code=ErrorCodes.RANGE_ERROR,
            details=full_details,
        )


class StateError(IMTException):
    """The tree is not in a state that permits the operation."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.STATE_ERROR,
            details=details,
        )


class StructuralError(IMTException, ValueError):
    """A proof object is missing fields or has an impossible shape."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.STRUCTURAL_ERROR,
            details=details,
        )


class DecodeError(IMTException, ValueError):
    """A serialized tree or proof could not be parsed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.DECODE_ERROR,
            details=details,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[IMTException]] = {
    ErrorCodes.PARAMETER_ERROR: ParameterError,
    ErrorCodes.CAPACITY_ERROR: CapacityError,
    ErrorCodes.RANGE_ERROR: RangeError,
    ErrorCodes.STATE_ERROR: StateError,
    ErrorCodes.STRUCTURAL_ERROR: StructuralError,
    ErrorCodes.DECODE_ERROR: DecodeError,
}
