"""
Router des soumissions d'élèves.
GET     /api/students : liste complète
POST    /api/students : insertion d'une soumission
OPTIONS /api/students : preflight CORS
"""

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import JSONResponse

from app.schemas.submission import MessageResponse
from app.services import submission_service
from app.services.submission_service import InvalidSubmissionError
from app.store import StoreError, SubmissionStore, get_store_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/students", tags=["Soumissions"])

ERROR_RESPONSES = {400: {"model": MessageResponse}, 500: {"model": MessageResponse}}


def message_response(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    body = MessageResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.options("", summary="Preflight CORS")
def preflight():
    """Répond au preflight sans accéder au store (headers CORS ajoutés par le middleware)."""
    return Response(status_code=200)


@router.get("", summary="Lister les soumissions", responses=ERROR_RESPONSES)
def list_submissions(store_provider: Callable[[], SubmissionStore] = Depends(get_store_provider)):
    """Retourne toutes les soumissions, sans filtre ni ordre garanti."""
    try:
        store = store_provider()
        return JSONResponse(status_code=200, content=submission_service.list_submissions(store))
    except StoreError as e:
        logger.error("Erreur store (GET) : %s", e.message)
        return message_response(500, f"Failed to retrieve data: {e.message}")
    except Exception as e:
        logger.error("Erreur inattendue (GET) : %s", e, exc_info=True)
        return message_response(500, "An unexpected error occurred while fetching data.", str(e))


@router.post("", status_code=201, summary="Enregistrer une soumission", responses=ERROR_RESPONSES)
def create_submission(
    payload: Any = Body(default=None),
    store_provider: Callable[[], SubmissionStore] = Depends(get_store_provider),
):
    """
    Insère une soumission. Seuls `id` et `fullName` sont obligatoires.
    La ligne insérée n'est pas renvoyée.
    """
    try:
        submission_service.save_submission(store_provider(), payload)
    except InvalidSubmissionError:
        return message_response(400, "Invalid submission data.")
    except StoreError as e:
        logger.error("Erreur store (POST) : %s", e.message)
        return message_response(500, f"Failed to save data: {e.message}")
    except Exception as e:
        logger.error("Erreur inattendue (POST) : %s", e, exc_info=True)
        return message_response(500, "An unexpected error occurred while saving data.", str(e))
    return message_response(201, "Data saved successfully.")
