import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from epharmacy.core.config import settings
from epharmacy.core.exceptions import EPharmacyException

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ePharmacy API",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EPharmacyException)
async def epharmacy_exception_handler(request: Request, exc: EPharmacyException):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc!r}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Import routers after app creation to avoid circular imports
from epharmacy.api import (
    auth,
    users,
    brands,
    ingredients,
    categories,
    products,
    orders,
)

# Routers - all already have /api prefix
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(brands.router)
app.include_router(ingredients.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(orders.router)


@app.get("/")
def root():
    return {"status": "ok", "service": "epharmacy-api"}


@app.get("/api/health")
def health_check():
    return {
        "status": "healthy",
        "env": settings.ENV
    }
