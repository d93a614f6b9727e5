"""Exceptions raised by the payment schedule model."""

from __future__ import annotations

from typing import Optional


class PaymentScheduleError(Exception):
    """Base class for every recoverable error in the package."""


class ValidationError(PaymentScheduleError, ValueError):
    """Create/update input or a status change was rejected."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(PaymentScheduleError, KeyError):
    """The id is unknown or lives in the other partition."""

    def __init__(self, payment_id: int, partition: str = "active") -> None:
        super().__init__(payment_id)
        self.payment_id = payment_id
        self.partition = partition

    def __str__(self) -> str:
        return f"Payment {self.payment_id} not found in {self.partition} payments"


class ConfirmationRequiredError(PaymentScheduleError):
    """A permanent delete was attempted without explicit confirmation."""


class DocumentError(PaymentScheduleError):
    """Base class for document store rejections.

    ``message_key`` names the localized text shown to the uploader.
    """

    message_key: str | None = None


class UnsupportedFormatError(DocumentError):
    message_key = "unsupported_format"


class FileTooLargeError(DocumentError):
    message_key = "file_too_large"
