"""
Accès au store des soumissions.

Deux implémentations, choisies selon le schéma de SUPABASE_URL :
- http(s)  → API REST du store hébergé (PostgREST) via httpx ;
- autre    → connexion SQL directe via SQLAlchemy.

Le client est construit une seule fois par process et partagé par toutes les
requêtes (voir get_store).
"""

import logging
import threading
from typing import Callable, Optional, Protocol

import httpx
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.config import Settings, settings
from app.database import build_engine
from app.models.submission import StudentSubmissionRecord

logger = logging.getLogger(__name__)

TABLE_NAME = StudentSubmissionRecord.__tablename__


class StoreError(Exception):
    """Échec d'une opération du store. Le message est celui renvoyé par le store."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SubmissionStore(Protocol):
    def fetch_all(self) -> list[dict]: ...

    def insert(self, row: dict) -> None: ...

    def close(self) -> None: ...


class RestSubmissionStore:
    """Client REST (PostgREST) authentifié par la clé de service."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            },
            timeout=timeout,
            transport=transport,
        )

    def fetch_all(self) -> list[dict]:
        response = self._send("GET", f"/{TABLE_NAME}", params={"select": "*"})
        return response.json() or []

    def insert(self, row: dict) -> None:
        self._send(
            "POST",
            f"/{TABLE_NAME}",
            json=[row],
            headers={"Prefer": "return=minimal"},
        )

    def close(self) -> None:
        self.client.close()

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StoreError(str(e) or type(e).__name__) from e
        if response.is_error:
            raise StoreError(_error_message(response))
        return response


def _error_message(response: httpx.Response) -> str:
    """Message d'erreur PostgREST ({"message": ...}), sinon le corps brut."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or f"HTTP {response.status_code}"


class SqlSubmissionStore:
    """Accès SQL direct à la table student_submissions."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, autoflush=False)

    def fetch_all(self) -> list[dict]:
        try:
            with self.session_factory() as db:
                records = db.execute(select(StudentSubmissionRecord)).scalars().all()
                return [record.to_row() for record in records]
        except SQLAlchemyError as e:
            raise StoreError(_sql_message(e)) from e

    def insert(self, row: dict) -> None:
        record = _to_record(row)
        with self.session_factory() as db:
            db.add(record)
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError(_sql_message(e)) from e

    def close(self) -> None:
        self.engine.dispose()


def _to_record(row: dict) -> StudentSubmissionRecord:
    """Convertit une ligne camelCase en enregistrement ORM. Colonne inconnue → StoreError."""
    attributes = {
        column.name: attr.key
        for attr in StudentSubmissionRecord.__mapper__.column_attrs
        for column in attr.columns
    }
    values = {}
    for key, value in row.items():
        if key not in attributes:
            raise StoreError(f"Could not find the '{key}' column of '{TABLE_NAME}'")
        values[attributes[key]] = value
    return StudentSubmissionRecord(**values)


def _sql_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


def create_store(config: Settings) -> SubmissionStore:
    """Construit le client adapté à l'URL configurée."""
    if config.SUPABASE_URL.startswith(("http://", "https://")):
        logger.info("Store REST configuré : %s", config.SUPABASE_URL)
        return RestSubmissionStore(
            config.SUPABASE_URL,
            config.SUPABASE_SERVICE_KEY,
            timeout=config.STORE_TIMEOUT_SECONDS,
        )
    logger.info("Store SQL configuré (connexion directe)")
    engine = build_engine(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)
    return SqlSubmissionStore(engine)


_store: Optional[SubmissionStore] = None
_store_lock = threading.Lock()


def get_store() -> SubmissionStore:
    """Fournit le client du store, créé au premier appel."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = create_store(settings)
    return _store


def close_store() -> None:
    """Libère le client partagé (arrêt de l'application)."""
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None


def get_store_provider() -> Callable[[], SubmissionStore]:
    """
    Dépendance FastAPI — fournit l'accesseur du store plutôt que le client,
    pour que les routes le résolvent dans leur propre gestion d'erreurs.
    """
    return get_store
