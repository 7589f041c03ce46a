# ===================================
# app/services/review_service.py
# ===================================

import logging
import math
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.review import Review, ReviewStatus
from app.repositories.review_repo import ReviewRepository
from app.schemas.review import ReviewCreate
from app.services.purchase_verifier import ShopifyPurchaseVerifier

logger = logging.getLogger(__name__)


def total_pages_for(total_count: int, limit: int) -> int:
    """Nombre de pages, au minimum 1 même sans avis"""
    return max(1, math.ceil(total_count / limit))


class ReviewService:
    """Service pour la logique métier des avis"""

    def __init__(self, db: Session, verifier: Optional[ShopifyPurchaseVerifier] = None):
        self.db = db
        self.verifier = verifier
        self.review_repo = ReviewRepository(db)

    def list_approved_reviews(self, product_id: str, page: int, limit: int) -> dict:
        """Page d'avis approuvés d'un produit, du plus récent au plus ancien"""
        offset = (page - 1) * limit
        reviews, total = self.review_repo.get_approved_reviews(product_id, skip=offset, limit=limit)
        return {
            "reviews": reviews,
            "page": page,
            "total_pages": total_pages_for(total, limit),
            "total_count": total,
        }

    def is_verified_buyer(self, product_id: str, email: str) -> bool:
        """
        Vérification non bloquante: un échec vaut "non vérifié"
        """
        if self.verifier is None:
            return False
        try:
            return self.verifier.verify_purchase(product_id, email)
        except Exception as e:
            logger.warning(f"Verification failed for product {product_id}: {e}", exc_info=True)
            return False

    def submit_review(self, review_data: ReviewCreate) -> Review:
        """Enregistrer un avis soumis par un client (statut pending)"""
        verified = self.is_verified_buyer(review_data.product_id, review_data.author_email)

        review_dict = review_data.model_dump()
        review_dict["verified_buyer"] = verified
        review = self.review_repo.create_review(review_dict)

        logger.info(
            f"Avis {review.id} créé pour le produit {review.product_id} "
            f"(verified_buyer={verified})"
        )
        return review

    def list_reviews_for_moderation(self, status: ReviewStatus, limit: int) -> List[Review]:
        return self.review_repo.get_reviews_by_status(status, limit=limit)

    def moderate_review(self, review_id: UUID, status: ReviewStatus) -> bool:
        """
        Approuver ou rejeter un avis.
        Un ID inconnu n'est pas une erreur pour l'appelant; retourne False dans ce cas.
        """
        updated = self.review_repo.update_review_status(review_id, status)
        if not updated:
            logger.warning(f"Moderation of unknown review {review_id} ignored")
            return False
        logger.info(f"Avis {review_id} -> {ReviewStatus(status).value}")
        return True
