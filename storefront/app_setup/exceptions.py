"""
Gestionnaires d’exceptions utilisés par la factory.
- ShopError -> JSON {"detail": ...} avec le status de l'erreur (détail générique pour les 5xx).
- HTTPException (401 auth, 429 rate limit, 400 paramètres) conserve la réponse JSON standard.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.errors import ShopError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ShopError)
    async def shop_error_handler(request: Request, exc: ShopError):
        if exc.status_code >= 500:
            logger.error("app_setup.exceptions %s path=%s detail=%s", type(exc).__name__, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_detail})

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))
