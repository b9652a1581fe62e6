"""
Configuration partagée pour tous les tests.
Les secrets du store sont définis avant l'import de l'application (sinon
app.config lève une ConfigurationError), et la dépendance get_store_provider est
overridée pour éviter toute connexion réelle.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

from app.database import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.store import SqlSubmissionStore, get_store_provider  # noqa: E402


@pytest.fixture
def store():
    """Store mocké : aucune ligne par défaut."""
    mock_store = MagicMock()
    mock_store.fetch_all.return_value = []
    return mock_store


@pytest.fixture
def client(store):
    """Client HTTP de test avec le store mocké."""
    app.dependency_overrides[get_store_provider] = lambda: lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sql_store():
    """Store SQL réel sur une base SQLite en mémoire (partagée entre threads)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield SqlSubmissionStore(engine)
    engine.dispose()


@pytest.fixture
def sql_client(sql_store):
    """Client HTTP de test branché sur le store SQLite."""
    app.dependency_overrides[get_store_provider] = lambda: lambda: sql_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
