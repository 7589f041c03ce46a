# ===================================
# app/api/deps.py
# ===================================
from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.services.purchase_verifier import ShopifyPurchaseVerifier
from app.services.review_service import ReviewService

# Dernière page acceptée: (MAX_PAGE - 1) * max_page_size reste loin des limites BIGINT
MAX_PAGE = 1_000_000


def get_purchase_verifier(request: Request) -> ShopifyPurchaseVerifier:
    """
    Vérificateur d'achat partagé, créé au démarrage de l'application
    """
    return request.app.state.verifier


def get_review_service(
    db: Session = Depends(get_db),
    verifier: ShopifyPurchaseVerifier = Depends(get_purchase_verifier)
) -> ReviewService:
    return ReviewService(db, verifier)


def clamp_limit(limit: int, settings: Settings) -> int:
    if limit < 1:
        return 1
    if limit > settings.max_page_size:
        return settings.max_page_size
    return limit


def get_pagination_params(
    page: int = Query(1, le=MAX_PAGE, description="Numéro de page"),
    limit: int = Query(10, description="Nombre d'avis par page"),
    settings: Settings = Depends(get_settings)
) -> tuple[int, int]:
    """
    Paramètres de pagination communs (page dans [1, MAX_PAGE], limit dans [1, max_page_size]).
    Au-delà de MAX_PAGE la requête est rejetée (400 Invalid page): l'OFFSET doit tenir en BIGINT.
    """
    if page < 1:
        page = 1
    return page, clamp_limit(limit, settings)
