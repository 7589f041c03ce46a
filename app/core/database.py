# ===================================
# app/core/database.py
# ===================================
import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    """
    Construire le moteur SQLAlchemy et son pool de connexions borné
    """
    return create_engine(
        settings.sqlalchemy_database_uri,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
        echo=settings.debug,  # Log des requêtes SQL en mode debug
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Générateur de session de base de données pour l'injection de dépendance FastAPI.
    La session (et sa connexion) est rendue au pool sur tous les chemins de sortie.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    """
    Crée la table reviews et son index s'ils n'existent pas encore
    """
    # Import pour enregistrer les modèles dans Base.metadata
    from app.models import review  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("✓ Tables créées")


def check_db_connection(engine: Engine) -> bool:
    """
    Vérifie la connexion à la base de données
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Erreur de connexion DB: {e}")
        return False
