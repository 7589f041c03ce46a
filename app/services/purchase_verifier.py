# ===================================
# app/services/purchase_verifier.py
# ===================================
"""
Vérification d'achat via l'Admin API Shopify.

Un auteur est "acheteur vérifié" si son email apparaît sur une commande payée
ou expédiée contenant le produit évalué.
"""

import enum
import logging
from typing import Any, Iterable, Optional

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)

PAID_FINANCIAL_STATUSES = {"paid"}
FULFILLED_STATUSES = {"fulfilled", "partial"}


class VerificationOutcome(str, enum.Enum):
    """Résultat détaillé d'une vérification"""
    VERIFIED = "verified"        # Commande trouvée avec le produit
    NOT_FOUND = "not_found"      # Aucune commande qualifiante
    UNAVAILABLE = "unavailable"  # Identifiants absents ou réponse non-2xx


def _is_qualifying_order(order: dict) -> bool:
    return (
        order.get("financial_status") in PAID_FINANCIAL_STATUSES
        or order.get("fulfillment_status") in FULFILLED_STATUSES
    )


def order_contains_product(orders: Iterable[dict], product_id: Any) -> bool:
    """Cherche le produit dans les lignes des commandes payées/expédiées"""
    wanted = str(product_id)
    for order in orders:
        if not _is_qualifying_order(order):
            continue
        for item in order.get("line_items") or []:
            if isinstance(item, dict) and str(item.get("product_id")) == wanted:
                return True
    return False


class ShopifyPurchaseVerifier:
    """Client de vérification d'achat pour une boutique Shopify"""

    def __init__(
        self,
        shop: Optional[str],
        access_token: Optional[str],
        api_version: str = "2024-07",
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.shop = (shop or "").removeprefix("https://").rstrip("/")
        self.access_token = access_token
        self.api_version = api_version
        self.client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.Client] = None) -> "ShopifyPurchaseVerifier":
        return cls(
            shop=settings.shopify_shop,
            access_token=settings.shopify_access_token,
            api_version=settings.shopify_api_version,
            client=client,
            timeout=settings.shopify_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.shop and self.access_token)

    @property
    def orders_url(self) -> str:
        return f"https://{self.shop}/admin/api/{self.api_version}/orders.json"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token or "",
            "Content-Type": "application/json",
        }

    def fetch_orders(self, email: str) -> Optional[list[dict]]:
        """
        Récupère les commandes d'un client.
        Retourne None si l'API répond avec un statut d'erreur.
        """
        response = self.client.get(
            self.orders_url,
            params={
                "email": email,
                "status": "any",
                "fields": "financial_status,fulfillment_status,line_items",
            },
            headers=self.headers,
        )
        if not response.is_success:
            logger.warning(
                f"Shopify orders lookup failed with status {response.status_code}"
            )
            return None

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Unexpected Shopify orders payload")
        orders = data.get("orders") or []
        if not isinstance(orders, list):
            raise ValueError("Unexpected Shopify orders payload")
        return [order for order in orders if isinstance(order, dict)]

    def check_purchase(self, product_id: Any, email: str) -> VerificationOutcome:
        """
        Vérifie l'achat et distingue les cas "pas d'achat" et "vérification impossible".
        Les erreurs de transport (httpx.HTTPError) sont propagées à l'appelant.
        """
        if not self.is_configured:
            logger.debug("Shopify credentials missing, skipping purchase verification")
            return VerificationOutcome.UNAVAILABLE

        orders = self.fetch_orders(email)
        if orders is None:
            return VerificationOutcome.UNAVAILABLE
        if order_contains_product(orders, product_id):
            return VerificationOutcome.VERIFIED
        return VerificationOutcome.NOT_FOUND

    def verify_purchase(self, product_id: Any, email: str) -> bool:
        """True si l'email a une commande payée/expédiée contenant le produit"""
        return self.check_purchase(product_id, email) is VerificationOutcome.VERIFIED

    def close(self) -> None:
        self.client.close()
