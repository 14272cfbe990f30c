"""Errors raised by the kudos service.

Three families, each mapped to one HTTP status by the web layer:
validation (400), not found (404) and unauthorized (401).
"""

from __future__ import annotations


class KudosError(Exception):
    """Base class for all kudos failures."""

    code = "kudos_error"
    default_message = "Kudos request failed."

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# -- validation (400) -------------------------------------------------------


class KudosValidationError(KudosError):
    code = "validation_error"


class MissingFieldError(KudosValidationError):
    code = "missing_field"
    default_message = "recipient_id and message are required."


class SelfRecipientError(KudosValidationError):
    code = "self_recipient"
    default_message = "You cannot send kudos to yourself."


class EmptyMessageError(KudosValidationError):
    code = "empty_message"
    default_message = "Message cannot be empty."


class MessageTooLongError(KudosValidationError):
    code = "message_too_long"
    default_message = "Message must be 500 characters or less."


class BannedContentError(KudosValidationError):
    code = "banned_content"
    default_message = "Message contains inappropriate content."


class DuplicateSubmissionError(KudosValidationError):
    code = "duplicate_submission"
    default_message = "Duplicate submission detected. Please wait before sending the same message again."


# -- not found (404) --------------------------------------------------------


class KudosNotFoundError(KudosError):
    code = "not_found"


class RecipientNotFoundError(KudosNotFoundError):
    code = "recipient_not_found"
    default_message = "Recipient not found."


class KudoNotFoundError(KudosNotFoundError):
    code = "kudo_not_found"
    default_message = "Kudos not found."


# -- authorization (401) ----------------------------------------------------


class UnauthorizedError(KudosError):
    code = "unauthorized"
    default_message = "Unauthorized. Admin access required."
