import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.core.config import settings
from storefront.api.v1.api import router as api_v1_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="Storefront API", version="0.1.0")

# set up CORS so the storefront and back office can talk to us
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# mount our API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "features": {"coupons": settings.FEATURE_COUPONS, "loyalty": settings.FEATURE_LOYALTY},
    }
