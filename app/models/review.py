# ===================================
# Fichier: app/models/review.py
# ===================================
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Uuid, CheckConstraint, Index
from sqlalchemy.sql import func

from app.core.database import Base


class ReviewStatus(str, enum.Enum):
    """Statuts de modération"""
    PENDING = "pending"      # En attente de modération
    APPROVED = "approved"    # Visible publiquement
    REJECTED = "rejected"    # Masqué


# Statuts qu'un modérateur peut appliquer
MODERATION_STATUSES = (ReviewStatus.APPROVED, ReviewStatus.REJECTED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_reviews_status"
        ),
        Index("idx_reviews_product_status", "product_id", "status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Produit Shopify
    product_id = Column(Text, nullable=False)
    product_handle = Column(Text, nullable=False, default="")

    # Note (1-5 étoiles)
    rating = Column(Integer, nullable=False)

    # Avis
    title = Column(String(100), nullable=False)
    body = Column(Text, nullable=False)

    # Auteur
    author_name = Column(String(255), nullable=False)
    author_email = Column(Text, nullable=False)

    # Modération
    verified_buyer = Column(Boolean, nullable=False, default=False)  # Achat vérifié
    status = Column(String(16), nullable=False, default=ReviewStatus.PENDING.value,
                    server_default=ReviewStatus.PENDING.value)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow,
                        server_default=func.now())

    def __repr__(self):
        return f"<Review(id={self.id}, product_id={self.product_id}, rating={self.rating}, status={self.status})>"
