# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_purchase_verifier
from app.core.config import Settings
from app.core.database import create_session_factory, init_db
from app.main import create_app
from app.models.review import Review, ReviewStatus


class StubVerifier:
    """Remplace ShopifyPurchaseVerifier: résultat fixe ou exception"""

    def __init__(self, result: bool = False, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[tuple] = []

    def verify_purchase(self, product_id: Any, email: str) -> bool:
        self.calls.append((product_id, email))
        if self.error is not None:
            raise self.error
        return self.result

    def close(self) -> None:
        pass


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(environment="test", shopify_shop=None, shopify_access_token=None)


@pytest.fixture()
def engine():
    """SQLite en mémoire partagé entre threads (TestClient)"""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return create_session_factory(engine)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def verifier() -> StubVerifier:
    return StubVerifier(result=False)


@pytest.fixture()
def app(test_settings: Settings, engine, session_factory, verifier: StubVerifier) -> FastAPI:
    application = create_app(test_settings)
    application.state.engine = engine
    application.state.session_factory = session_factory
    application.dependency_overrides[get_purchase_verifier] = lambda: verifier
    return application


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def make_review(db: Session) -> Callable[..., Review]:
    """Insère directement un avis avec un created_at contrôlé"""
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(
        product_id: str = "111",
        status: ReviewStatus = ReviewStatus.APPROVED,
        rating: int = 5,
        title: Optional[str] = None,
        author_email: str = "buyer@example.com",
    ) -> Review:
        counter["n"] += 1
        n = counter["n"]
        review = Review(
            product_id=product_id,
            product_handle="",
            rating=rating,
            title=title or f"Review {n}",
            body=f"Body {n}",
            author_name=f"Author {n}",
            author_email=author_email,
            verified_buyer=False,
            status=ReviewStatus(status).value,
            created_at=base_time + timedelta(minutes=n),
        )
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    return _make


@pytest.fixture()
def review_payload() -> dict:
    return {
        "product_id": "111",
        "product_handle": "blue-mug",
        "rating": 4,
        "title": "Great mug",
        "body": "Keeps my coffee warm for hours.",
        "author_name": "Sam",
        "author_email": "sam@example.com",
    }
