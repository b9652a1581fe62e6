"""
Connexion SQL directe au store (quand SUPABASE_URL n'est pas une URL HTTP).
Utilise SQLAlchemy avec un moteur synchrone.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def build_engine(database_url: str, access_key: str, **kwargs) -> Engine:
    """
    Crée le moteur SQLAlchemy.
    La clé d'accès sert de mot de passe lorsque l'URL désigne un serveur distant.
    """
    url = make_url(database_url)
    if url.host and not url.password:
        url = url.set(password=access_key)
    return create_engine(url, pool_pre_ping=True, **kwargs)
