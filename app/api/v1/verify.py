# ===================================
# app/api/v1/verify.py
# ===================================
import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_purchase_verifier
from app.schemas.review import VerifyRequest, VerifyResponse
from app.services.purchase_verifier import ShopifyPurchaseVerifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/verify", response_model=VerifyResponse)
def verify_purchase(
    payload: VerifyRequest,
    verifier: ShopifyPurchaseVerifier = Depends(get_purchase_verifier)
) -> Any:
    """Vérification manuelle d'un achat par email"""
    try:
        verified = verifier.verify_purchase(payload.product_id, payload.email)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Vérification Shopify en échec: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Verification failed"
        )
    return VerifyResponse(verified=verified)
