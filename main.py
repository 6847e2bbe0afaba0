from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from api.routes import geocoding
from core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Set specific log levels
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)  # Reduce noise from access logs
logging.getLogger("geopy").setLevel(logging.WARNING)


app = FastAPI(
    title="Storefront Location API",
    description="Geocoding endpoints behind the checkout address picker",
    version="1.0.0",
)

allowed_origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(geocoding.router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Storefront Location API", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
