import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api import cooking_sessions, ingredients, prices, recipes

logger = logging.getLogger(__name__)

app = FastAPI(title="Kitchen Ledger", version="0.1.0")


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Turn unhandled store failures into a generic 500.

    The underlying error is logged, never returned to the client.
    """
    logger.error(
        "Database error: method=%s, path=%s, error=%s",
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


# Include routers
app.include_router(ingredients.router)
app.include_router(prices.router)
app.include_router(recipes.router)
app.include_router(cooking_sessions.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
