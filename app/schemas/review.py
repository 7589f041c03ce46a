# ===================================
# app/schemas/review.py
# ===================================

from typing import List
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from app.models.review import ReviewStatus, MODERATION_STATUSES

REQUIRED_REVIEW_FIELDS = ("product_id", "rating", "title", "body", "author_name", "author_email")

MAX_TITLE_LENGTH = 100
MAX_BODY_LENGTH = 5000
MAX_AUTHOR_NAME_LENGTH = 255

RATING_ERROR = "Rating must be an integer between 1 and 5"


def _require_object(data):
    if not isinstance(data, dict):
        raise ValueError("Invalid JSON")
    return data


class ReviewCreate(BaseModel):
    product_id: str
    product_handle: str = ""
    rating: int
    title: str
    body: str
    author_name: str
    author_email: str

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data):
        """Le premier champ manquant (ou vide) est signalé"""
        _require_object(data)
        for field in REQUIRED_REVIEW_FIELDS:
            if not data.get(field):
                raise ValueError(f"Missing field: {field}")
        return data

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v):
        # Les IDs Shopify arrivent souvent en nombre
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("product_handle", mode="before")
    @classmethod
    def default_handle(cls, v):
        return v or ""

    @field_validator("rating", mode="before")
    @classmethod
    def check_rating(cls, v):
        if isinstance(v, bool):
            raise ValueError(RATING_ERROR)
        if isinstance(v, int):
            # Comparaison directe: un entier JSON géant ne passe pas en float
            if not 1 <= v <= 5:
                raise ValueError(RATING_ERROR)
            return v
        if isinstance(v, str):
            v = v.strip()
        try:
            rating = float(v)
        except (TypeError, ValueError, OverflowError):
            raise ValueError(RATING_ERROR)
        if not rating.is_integer() or not 1 <= rating <= 5:
            raise ValueError(RATING_ERROR)
        return int(rating)

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        if len(v) > MAX_TITLE_LENGTH:
            raise ValueError("Review title is too long")
        return v

    @field_validator("body")
    @classmethod
    def check_body(cls, v):
        # Anti-spam basique
        if len(v) > MAX_BODY_LENGTH:
            raise ValueError("Review body is too long")
        return v

    @field_validator("author_name")
    @classmethod
    def check_author_name(cls, v):
        if len(v) > MAX_AUTHOR_NAME_LENGTH:
            raise ValueError("Author name is too long")
        return v


class ReviewPublic(BaseModel):
    """Avis tel qu'affiché sur la fiche produit (sans email)"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: str
    product_handle: str
    rating: int
    title: str
    body: str
    author_name: str
    verified_buyer: bool
    status: ReviewStatus
    created_at: datetime


class ReviewAdmin(ReviewPublic):
    author_email: str


class ReviewsPage(BaseModel):
    reviews: List[ReviewPublic]
    page: int
    total_pages: int
    total_count: int


class AdminReviewsList(BaseModel):
    reviews: List[ReviewAdmin]


class AdminReviewUpdate(BaseModel):
    id: UUID
    status: ReviewStatus

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data):
        _require_object(data)
        if not data.get("id") or not data.get("status"):
            raise ValueError("Missing id or status")
        return data

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        if v not in [s.value for s in MODERATION_STATUSES]:
            raise ValueError("Invalid status")
        return v


class VerifyRequest(BaseModel):
    product_id: str
    email: str

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data):
        _require_object(data)
        if not data.get("product_id") or not data.get("email"):
            raise ValueError("Missing product_id or email")
        return data

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class VerifyResponse(BaseModel):
    verified: bool


class OkResponse(BaseModel):
    ok: bool = True
