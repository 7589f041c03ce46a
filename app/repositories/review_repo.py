from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy import select, func, desc, update

from app.models.review import Review, ReviewStatus, MODERATION_STATUSES


class ReviewRepository:
    """Repository pour la gestion des avis produits"""

    def __init__(self, db: Session):
        self.db = db

    def get_review_by_id(self, review_id: UUID) -> Optional[Review]:
        """Récupérer un avis par son ID"""
        return self.db.get(Review, review_id)

    def get_approved_reviews(self, product_id: str, skip: int = 0,
                             limit: int = 10) -> Tuple[List[Review], int]:
        """Récupérer les avis approuvés d'un produit avec pagination"""
        conditions = (
            Review.product_id == product_id,
            Review.status == ReviewStatus.APPROVED.value,
        )

        # Compter le total
        total = self.db.scalar(
            select(func.count()).select_from(Review).where(*conditions)
        )

        reviews = self.db.scalars(
            select(Review)
            .where(*conditions)
            .order_by(desc(Review.created_at))
            .offset(skip)
            .limit(limit)
        ).all()

        return list(reviews), total or 0

    def get_reviews_by_status(self, status: ReviewStatus, limit: int = 50) -> List[Review]:
        """Récupérer les avis par statut (modération)"""
        return list(self.db.scalars(
            select(Review)
            .where(Review.status == ReviewStatus(status).value)
            .order_by(desc(Review.created_at))
            .limit(limit)
        ))

    def create_review(self, review_data: dict) -> Review:
        """Créer un nouvel avis, toujours en attente de modération"""
        review = Review(**review_data)
        review.status = ReviewStatus.PENDING.value
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def update_review_status(self, review_id: UUID, status: ReviewStatus) -> int:
        """
        Changer le statut d'un avis.
        Retourne le nombre de lignes modifiées (0 si l'avis n'existe pas).
        """
        status = ReviewStatus(status)
        if status not in MODERATION_STATUSES:
            raise ValueError(f"Cannot moderate a review to {status.value!r}")

        result = self.db.execute(
            update(Review)
            .where(Review.id == review_id)
            .values(status=status.value)
        )
        self.db.commit()
        return result.rowcount
