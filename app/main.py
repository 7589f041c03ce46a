# ===================================
# app/main.py
# ===================================
from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from typing import Optional
import logging

from app.core.config import Settings, get_settings
from app.core.database import create_db_engine, create_session_factory, init_db, check_db_connection
from app.core.errors import register_exception_handlers
from app.core.middleware import CORSHeadersMiddleware
from app.services.purchase_verifier import ShopifyPurchaseVerifier

# Import des routes
from app.api.v1 import reviews, verify, admin

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestionnaire de cycle de vie: pool DB et client Shopify"""
    settings: Settings = app.state.settings

    # Démarrage
    logger.info("🚀 Démarrage du service d'avis produits...")

    engine = create_db_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.db_auto_create:
        init_db(engine)

    app.state.verifier = ShopifyPurchaseVerifier.from_settings(settings)
    if not settings.shopify_configured:
        logger.warning("⚠️  Identifiants Shopify absents: les avis ne seront pas vérifiés")

    logger.info("✅ Application démarrée avec succès")

    yield

    # Arrêt
    logger.info("⏹️ Arrêt de l'application...")
    app.state.verifier.close()
    engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Factory pour créer l'application FastAPI"""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # CORS (réponse aux OPTIONS + en-têtes sur toutes les réponses)
    app.add_middleware(CORSHeadersMiddleware, settings=settings)
    register_exception_handlers(app)

    # Routes
    app.include_router(reviews.router, prefix=settings.api_prefix, tags=["Reviews"])
    app.include_router(verify.router, prefix=settings.api_prefix, tags=["Verification"])
    app.include_router(admin.router, prefix=settings.api_prefix, tags=["Admin"])

    # Route de santé
    @app.get("/health")
    def health_check(request: Request):
        """Vérification de la santé de l'API"""
        db_status = "ok" if check_db_connection(request.app.state.engine) else "error"

        return {
            "status": "ok" if db_status == "ok" else "error",
            "version": settings.app_version,
            "environment": settings.environment,
            "database": db_status,
            "verification": "enabled" if settings.shopify_configured else "disabled"
        }

    # Route racine
    @app.get("/")
    def root():
        return {
            "message": f"Bienvenue sur {settings.app_name}",
            "version": settings.app_version,
            "health": "/health"
        }

    return app


# Créer l'instance de l'application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
        log_level="info"
    )
