# ===================================
# app/api/v1/reviews.py
# ===================================
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_pagination_params, get_review_service
from app.schemas.review import ReviewCreate, ReviewPublic, ReviewsPage, OkResponse
from app.services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/reviews", response_model=ReviewsPage)
def list_reviews(
    product_id: Optional[str] = Query(None, description="ID produit Shopify"),
    pagination: tuple[int, int] = Depends(get_pagination_params),
    review_service: ReviewService = Depends(get_review_service)
) -> Any:
    """
    Récupérer les avis approuvés d'un produit avec pagination
    """
    if not product_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing product_id")

    page, limit = pagination
    try:
        result = review_service.list_approved_reviews(product_id, page=page, limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"Erreur lecture des avis: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching reviews"
        )

    result["reviews"] = [ReviewPublic.model_validate(review) for review in result["reviews"]]
    return ReviewsPage(**result)


@router.post("/reviews", response_model=OkResponse)
def create_review(
    review_data: ReviewCreate,
    review_service: ReviewService = Depends(get_review_service)
) -> Any:
    """
    Soumettre un nouvel avis (en attente de modération)
    """
    try:
        review_service.submit_review(review_data)
    except SQLAlchemyError as e:
        logger.error(f"Erreur enregistrement de l'avis: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error saving review"
        )
    return OkResponse()
