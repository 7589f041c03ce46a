# ===================================
# app/core/config.py
# ===================================
"""
Configuration centralisée de l'application avec Pydantic Settings.
Gère toutes les variables d'environnement et leur validation.
"""

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration principale de l'application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Product Reviews API", description="Nom de l'application")
    app_version: str = Field(default="1.0.0", description="Version de l'application")
    debug: bool = Field(default=False, description="Mode debug (echo SQL)")
    environment: str = Field(default="development", description="Environnement (dev/staging/prod)")

    # API
    api_prefix: str = Field(default="", description="Préfixe des routes")

    # Base de données (mêmes clés que libpq)
    pghost: str = Field(default="localhost", description="Hôte PostgreSQL")
    pgport: int = Field(default=5432, description="Port PostgreSQL")
    pgdatabase: str = Field(default="reviews", description="Nom de la base")
    pguser: str = Field(default="postgres", description="Utilisateur PostgreSQL")
    pgpassword: str = Field(default="", description="Mot de passe PostgreSQL")
    database_url: Optional[str] = Field(
        default=None,
        description="URL SQLAlchemy complète, prioritaire sur les clés PG*",
    )
    db_pool_size: int = Field(default=5, ge=1, description="Taille du pool de connexions")
    db_pool_recycle: int = Field(default=30, description="Recyclage des connexions (secondes)")
    db_auto_create: bool = Field(default=True, description="Créer la table au démarrage")

    # Shopify (vérification d'achat)
    shopify_shop: Optional[str] = Field(default=None, description="Domaine de la boutique")
    shopify_access_token: Optional[str] = Field(default=None, description="Token Admin API")
    shopify_api_version: str = Field(default="2024-07", description="Version de l'Admin API")
    shopify_timeout_seconds: float = Field(default=10.0, description="Timeout des appels Shopify")

    # CORS
    cors_allow_origin: str = Field(default="*", description="Origin autorisé pour CORS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Méthodes HTTP autorisées"
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"], description="Headers autorisés"
    )

    # Pagination
    max_page_size: int = Field(default=100, description="Taille de page maximale")

    # Logging
    log_level: str = Field(default="INFO", description="Niveau de log")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Valide que l'environnement est correct."""
        allowed_envs = ["development", "staging", "production", "test"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Valide le niveau de log."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @property
    def sqlalchemy_database_uri(self) -> str:
        """URL de connexion, construite depuis les clés PG* si besoin."""
        if self.database_url:
            return self.database_url
        password = quote_plus(self.pgpassword)  # Encode les caractères spéciaux
        return (
            f"postgresql+psycopg://{self.pguser}:{password}"
            f"@{self.pghost}:{self.pgport}/{self.pgdatabase}"
        )

    @property
    def shopify_configured(self) -> bool:
        """True si les identifiants Shopify sont présents."""
        return bool(self.shopify_shop and self.shopify_access_token)


@lru_cache()
def get_settings() -> Settings:
    """
    Retourne l'instance des settings avec cache.
    Le cache évite de recharger les variables d'environnement à chaque appel.
    """
    return Settings()
