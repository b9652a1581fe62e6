"""
Point d'entrée principal de la passerelle des soumissions.
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.routers import submissions
from app.store import close_store

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

ALLOWED_METHODS = "GET, POST, OPTIONS"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : libère le client du store à l'arrêt."""
    logger.info("Passerelle démarrée (env=%s)", settings.ENV)
    yield
    close_store()


app = FastAPI(
    title="Submission Gateway",
    description="Lecture et enregistrement des soumissions d'élèves vers le store hébergé",
    version=VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


# CORS — ouvert à toutes les origines. Les headers sont posés sur chaque réponse,
# y compris les erreurs et les 405, qu'il y ait un header Origin ou non.
@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


app.include_router(submissions.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Méthode non supportée → 405 texte brut avec header Allow ; sinon réponse JSON standard."""
    if exc.status_code == 405 and request.url.path == submissions.router.prefix:
        return PlainTextResponse(
            f"Method {request.method} Not Allowed",
            status_code=405,
            headers={"Allow": ALLOWED_METHODS},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Corps illisible (JSON mal formé) → même réponse qu'une soumission invalide."""
    return JSONResponse(status_code=400, content={"message": "Invalid submission data."})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Dernier recours pour les exceptions non gérées.
    ServerErrorMiddleware est en dehors du middleware CORS : les headers sont posés ici.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "An unexpected error occurred.", "error": str(exc)},
        headers=CORS_HEADERS,
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle (sans accès au store)."""
    return {"status": "ok", "service": "Submission Gateway", "version": VERSION}
