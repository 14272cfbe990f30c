"""Kudos board core: models, errors and the in-memory service."""

from kudos.board.errors import (
    BannedContentError,
    DuplicateSubmissionError,
    EmptyMessageError,
    KudoNotFoundError,
    KudosError,
    KudosNotFoundError,
    KudosValidationError,
    MessageTooLongError,
    MissingFieldError,
    RecipientNotFoundError,
    SelfRecipientError,
    UnauthorizedError,
)
from kudos.board.models import Kudo, KudoView
from kudos.board.service import KudosService

__all__ = [
    "BannedContentError",
    "DuplicateSubmissionError",
    "EmptyMessageError",
    "Kudo",
    "KudoNotFoundError",
    "KudoView",
    "KudosError",
    "KudosNotFoundError",
    "KudosService",
    "KudosValidationError",
    "MessageTooLongError",
    "MissingFieldError",
    "RecipientNotFoundError",
    "SelfRecipientError",
    "UnauthorizedError",
]
