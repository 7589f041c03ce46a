# ===================================
# app/core/errors.py
# ===================================
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Not found"
INTERNAL_ERROR_MESSAGE = "Internal error"


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def error_message(err: dict) -> str:
    """
    Message lisible pour une erreur de validation.
    Les validateurs des schémas fournissent déjà le message final (ex: "Missing field: title").
    """
    loc = [str(part) for part in err.get("loc", ())]
    err_type = err.get("type", "")

    if err_type == "json_invalid":
        return "Invalid JSON"
    if err_type == "value_error":
        return str(err.get("msg", "")).removeprefix("Value error, ")
    if err_type == "missing":
        return f"Missing {loc[-1]}" if loc else "Missing request body"
    field = loc[-1] if loc else "request"
    return f"Invalid {field}"


def empty_body_message(request: Request) -> Optional[str]:
    """
    Corps vide: on le valide comme un objet JSON vide pour nommer le premier champ manquant
    """
    route = request.scope.get("route")
    body_field = getattr(route, "body_field", None)
    model = getattr(getattr(body_field, "field_info", None), "annotation", None)
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        return None
    try:
        model.model_validate({})
    except ValidationError as e:
        errors = e.errors()
        return error_message(errors[0]) if errors else None
    return None


def validation_message(exc: RequestValidationError, request: Optional[Request] = None) -> str:
    """Message pour la première erreur de validation de la requête"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    err = errors[0]
    if err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",):
        message = empty_body_message(request) if request is not None else None
        return message or "Missing request body"
    return error_message(err)


def register_exception_handlers(app: FastAPI) -> None:
    """Gestion globale des erreurs: toutes les réponses ont la forme {"message": ...}"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Route inconnue ou méthode non supportée
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return error_response(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(validation_message(exc, request), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Erreur non gérée: {exc}", exc_info=True)
        return error_response(INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)
