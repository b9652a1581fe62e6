"""
Configuration centrale de l'application via variables d'environnement.
Charger depuis un fichier .env en développement.

Les deux secrets du store (URL + clé de service) sont obligatoires : s'ils
manquent, l'import de ce module échoue et le process ne démarre pas.
"""

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Configuration absente ou invalide, fatale au démarrage."""


class Settings(BaseSettings):
    # Store hébergé (obligatoires, aucune valeur par défaut)
    SUPABASE_URL: str
    SUPABASE_SERVICE_KEY: str

    STORE_TIMEOUT_SECONDS: float = 10.0

    # Environnement
    ENV: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("SUPABASE_URL", "SUPABASE_SERVICE_KEY")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("La variable ne peut pas être vide.")
        return v.strip()


def load_settings(**overrides) -> Settings:
    """
    Construit les settings et transforme toute erreur de validation
    en ConfigurationError explicite (visible dans les logs de déploiement).
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            "FATAL: SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables must be set."
        ) from e


settings = load_settings()
