"""
Service métier des soumissions : validation du corps POST et accès au store.
"""

import logging
from typing import Any

from pydantic import ValidationError

from app.schemas.submission import StudentSubmission
from app.store import SubmissionStore

logger = logging.getLogger(__name__)


class InvalidSubmissionError(ValueError):
    """Corps de soumission absent ou sans `id` / `fullName`."""


def parse_submission(payload: Any) -> StudentSubmission:
    """
    Valide le corps reçu.
    Lève une InvalidSubmissionError si le corps est absent, n'est pas un objet
    JSON, ou si `id` / `fullName` sont vides.
    """
    if not payload or not isinstance(payload, dict):
        raise InvalidSubmissionError("Invalid submission data.")
    try:
        return StudentSubmission.model_validate(payload)
    except ValidationError as e:
        raise InvalidSubmissionError("Invalid submission data.") from e


def list_submissions(store: SubmissionStore) -> list[dict]:
    """Retourne toutes les soumissions (liste vide si aucune, jamais None)."""
    return store.fetch_all() or []


def save_submission(store: SubmissionStore, payload: Any) -> StudentSubmission:
    """Valide puis insère une soumission. Les erreurs du store sont propagées (StoreError)."""
    submission = parse_submission(payload)
    store.insert(submission.to_row())
    logger.info("Soumission %s enregistrée", submission.id)
    return submission
