# ===================================
# app/api/v1/admin.py
# ===================================
# Pas d'authentification ici: ces routes doivent être protégées en amont
# (API gateway ou middleware d'authentification).
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import clamp_limit, get_review_service
from app.core.config import Settings, get_settings
from app.models.review import ReviewStatus
from app.schemas.review import AdminReviewsList, AdminReviewUpdate, ReviewAdmin, OkResponse
from app.services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/admin/reviews", response_model=AdminReviewsList)
def list_admin_reviews(
    review_status: ReviewStatus = Query(ReviewStatus.PENDING, alias="status", description="Statut de modération"),
    limit: int = Query(50, description="Nombre d'avis à retourner"),
    settings: Settings = Depends(get_settings),
    review_service: ReviewService = Depends(get_review_service)
) -> Any:
    """
    Récupérer les avis par statut (par défaut: en attente)
    """
    try:
        reviews = review_service.list_reviews_for_moderation(
            review_status, limit=clamp_limit(limit, settings)
        )
    except SQLAlchemyError as e:
        logger.error(f"Erreur lecture des avis admin: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching admin reviews"
        )
    return AdminReviewsList(reviews=[ReviewAdmin.model_validate(review) for review in reviews])


@router.post("/admin/reviews", response_model=OkResponse)
def update_review_status(
    payload: AdminReviewUpdate,
    review_service: ReviewService = Depends(get_review_service)
) -> Any:
    """
    Approuver ou rejeter un avis. Un ID inconnu est ignoré sans erreur.
    """
    try:
        review_service.moderate_review(payload.id, payload.status)
    except SQLAlchemyError as e:
        logger.error(f"Erreur mise à jour de l'avis {payload.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating review"
        )
    return OkResponse()
