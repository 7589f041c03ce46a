# ===================================
# app/core/middleware.py
# ===================================
import logging

from fastapi import Request, status
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.config import Settings
from app.core.errors import INTERNAL_ERROR_MESSAGE, error_response

logger = logging.getLogger(__name__)


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    CORS permissif: répond aux requêtes OPTIONS sur n'importe quel chemin et
    ajoute les en-têtes cross-origin à toutes les réponses, y compris les 500.
    """

    def __init__(self, app: ASGIApp, settings: Settings):
        super().__init__(app)
        self.cors_headers = {
            "Access-Control-Allow-Origin": settings.cors_allow_origin,
            "Access-Control-Allow-Methods": ", ".join(settings.cors_allow_methods),
            "Access-Control-Allow-Headers": ", ".join(settings.cors_allow_headers),
        }

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_204_NO_CONTENT, headers=self.cors_headers)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(f"Erreur non gérée sur {request.method} {request.url.path}: {exc}", exc_info=True)
            response = error_response(INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)

        response.headers.update(self.cors_headers)
        return response
