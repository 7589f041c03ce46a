# tests/integration/test_api_reviews.py
from __future__ import annotations

from sqlalchemy import func, select

from app.models.review import Review, ReviewStatus


def _count_reviews(session_factory) -> int:
    with session_factory() as s:
        return s.scalar(select(func.count()).select_from(Review))


def _only_review(session_factory) -> Review:
    with session_factory() as s:
        return s.scalars(select(Review)).one()


# -------------------------
# GET /reviews
# -------------------------
def test_list_requires_product_id(client):
    r = client.get("/reviews")
    assert r.status_code == 400
    assert r.json() == {"message": "Missing product_id"}


def test_list_empty_product_has_one_page(client):
    r = client.get("/reviews", params={"product_id": "nothing-here"})
    assert r.status_code == 200, r.text
    assert r.json() == {"reviews": [], "page": 1, "total_pages": 1, "total_count": 0}


def test_list_returns_only_approved(client, make_review):
    for _ in range(3):
        make_review(status=ReviewStatus.APPROVED)
    make_review(status=ReviewStatus.PENDING)
    make_review(status=ReviewStatus.REJECTED)
    make_review(product_id="other", status=ReviewStatus.APPROVED)

    r = client.get("/reviews", params={"product_id": "111"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total_count"] == 3
    assert len(body["reviews"]) == 3
    assert all(item["status"] == "approved" for item in body["reviews"])
    assert all(item["product_id"] == "111" for item in body["reviews"])


def test_list_hides_author_email(client, make_review):
    make_review(author_email="secret@example.com")
    item = client.get("/reviews", params={"product_id": "111"}).json()["reviews"][0]
    assert "author_email" not in item
    assert item["author_name"]


def test_list_second_page_newest_first(client, make_review):
    created = [make_review(title=f"r{i}") for i in range(1, 13)]  # r12 is the newest
    newest_first = [r.title for r in reversed(created)]

    r = client.get("/reviews", params={"product_id": "111", "page": 2, "limit": 5})
    assert r.status_code == 200, r.text
    body = r.json()
    assert [item["title"] for item in body["reviews"]] == newest_first[5:10]
    assert body["page"] == 2
    assert body["total_pages"] == 3
    assert body["total_count"] == 12


def test_list_clamps_pagination(client, make_review):
    make_review()
    r = client.get("/reviews", params={"product_id": "111", "page": 0, "limit": 100000})
    assert r.status_code == 200
    body = r.json()
    assert body["page"] == 1
    assert body["total_pages"] == 1
    assert len(body["reviews"]) == 1


def test_list_rejects_non_integer_page(client):
    r = client.get("/reviews", params={"product_id": "111", "page": "abc"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid page"


# -------------------------
# POST /reviews
# -------------------------
def test_submit_stores_pending_review(client, session_factory, review_payload, verifier):
    verifier.result = True

    r = client.post("/reviews", json=review_payload)
    assert r.status_code == 200, r.text
    assert r.json() == {"ok": True}

    stored = _only_review(session_factory)
    assert stored.status == ReviewStatus.PENDING.value
    assert stored.verified_buyer is True
    assert stored.product_handle == "blue-mug"
    assert stored.rating == 4
    assert verifier.calls == [("111", "sam@example.com")]


def test_submit_survives_verifier_failure(client, session_factory, review_payload, verifier):
    verifier.error = RuntimeError("shopify down")

    r = client.post("/reviews", json=review_payload)
    assert r.status_code == 200, r.text

    stored = _only_review(session_factory)
    assert stored.verified_buyer is False
    assert stored.status == ReviewStatus.PENDING.value


def test_submit_defaults_product_handle(client, session_factory, review_payload):
    del review_payload["product_handle"]
    review_payload["product_id"] = 987654321  # numeric Shopify id

    r = client.post("/reviews", json=review_payload)
    assert r.status_code == 200, r.text

    stored = _only_review(session_factory)
    assert stored.product_handle == ""
    assert stored.product_id == "987654321"


def test_submit_missing_fields_named_in_order(client, session_factory, review_payload):
    for field in ("product_id", "rating", "title", "body", "author_name", "author_email"):
        payload = dict(review_payload)
        del payload[field]
        r = client.post("/reviews", json=payload)
        assert r.status_code == 400
        assert r.json() == {"message": f"Missing field: {field}"}

    payload = dict(review_payload, title="")
    r = client.post("/reviews", json=payload)
    assert r.json() == {"message": "Missing field: title"}

    r = client.post("/reviews", json={})
    assert r.json() == {"message": "Missing field: product_id"}

    assert _count_reviews(session_factory) == 0


def test_submit_rejects_bad_ratings(client, session_factory, review_payload):
    for rating in (0, 6, -1, 4.5, "abc", True, [5], 10**400, -(10**400), "1e400"):
        r = client.post("/reviews", json=dict(review_payload, rating=rating))
        assert r.status_code == 400, rating
        if rating != 0:  # 0 counts as missing
            assert r.json() == {"message": "Rating must be an integer between 1 and 5"}

    assert _count_reviews(session_factory) == 0


def test_submit_accepts_numeric_string_rating(client, session_factory, review_payload):
    r = client.post("/reviews", json=dict(review_payload, rating="5"))
    assert r.status_code == 200, r.text
    assert _only_review(session_factory).rating == 5


def test_submit_rejects_long_body(client, session_factory, review_payload):
    r = client.post("/reviews", json=dict(review_payload, body="x" * 5001))
    assert r.status_code == 400
    assert r.json() == {"message": "Review body is too long"}

    r = client.post("/reviews", json=dict(review_payload, body="x" * 5000))
    assert r.status_code == 200
    assert _count_reviews(session_factory) == 1


def test_submit_rejects_long_title(client, session_factory, review_payload):
    r = client.post("/reviews", json=dict(review_payload, title="t" * 101))
    assert r.status_code == 400
    assert r.json() == {"message": "Review title is too long"}
    assert _count_reviews(session_factory) == 0


def test_submit_invalid_json(client, session_factory):
    r = client.post("/reviews", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid JSON"}

    r = client.post("/reviews", json=[1, 2, 3])
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid JSON"}
    assert _count_reviews(session_factory) == 0


def test_submit_skips_verifier_on_validation_error(client, review_payload, verifier):
    client.post("/reviews", json=dict(review_payload, rating=9))
    assert verifier.calls == []


def test_list_rejects_page_beyond_last_allowed(client, make_review):
    make_review()
    r = client.get("/reviews", params={"product_id": "111", "page": str(10**30)})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid page"}

    r = client.get("/reviews", params={"product_id": "111", "page": 1_000_000, "limit": 100})
    assert r.status_code == 200, r.text
    assert r.json()["reviews"] == []


def test_empty_body_names_first_missing_field(client, session_factory):
    r = client.post("/reviews")
    assert r.status_code == 400
    assert r.json() == {"message": "Missing field: product_id"}

    r = client.post("/verify")
    assert r.status_code == 400
    assert r.json() == {"message": "Missing product_id or email"}

    r = client.post("/admin/reviews")
    assert r.status_code == 400
    assert r.json() == {"message": "Missing id or status"}

    assert _count_reviews(session_factory) == 0
