from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime
from sqlalchemy.exc import IntegrityError
import logging
import os
from dotenv import load_dotenv

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("reservas")

from reservas.routers import (
    auth,
    onboarding,
    tenants,
    services,
    providers,
    blocks,
    availability,
    bookings,
    clients,
)
from reservas.database import engine, Base, SessionLocal
from reservas.init_db import create_initial_admin
from reservas.utils.errors import is_conflict_error, is_production
import reservas.models  # noqa: F401
import uvicorn


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Las tablas en producción las crea Alembic; create_all solo cubre entornos locales
    if os.getenv("AUTO_CREATE_TABLES", "false").lower() in {"1", "true", "yes"}:
        Base.metadata.create_all(bind=engine)

    logger.info("Initializing database with super admin...")
    db = SessionLocal()
    try:
        create_initial_admin(db)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Reservas API",
    description="Multi-tenant booking API for barbershops: tenants, services, providers, availability and bookings",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
cors_origins = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["authentication"])
app.include_router(onboarding.router, prefix="/onboarding", tags=["onboarding"])
app.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
app.include_router(services.router, prefix="/tenants", tags=["services"])
app.include_router(providers.router, prefix="/tenants", tags=["providers"])
app.include_router(blocks.router, prefix="/tenants", tags=["blocks"])
app.include_router(availability.router, prefix="/tenants", tags=["availability"])
app.include_router(bookings.router, prefix="/tenants", tags=["bookings"])
app.include_router(clients.router, prefix="/tenants", tags=["clients"])


@app.get("/")
def read_root():
    return {"message": "Welcome to Reservas API"}


@app.get("/health")
def health():
    return {"status": "OK", "timestamp": datetime.utcnow().isoformat()}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            fields.append(".".join(loc))
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Missing or invalid fields: " + ", ".join(fields),
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    if is_conflict_error(exc):
        logger.warning(f"Conflict on {request.method} {request.url.path}: {exc.orig}")
        return JSONResponse(status_code=409, content={"detail": "Resource already exists or overlaps"})
    return await unhandled_exception_handler(request, exc)


# Global unhandled exception handler -> logs ERROR
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error | path=%s | method=%s | client=%s",
        request.url.path,
        request.method,
        request.client.host if request.client else "unknown",
    )
    content = {"detail": "Internal Server Error"}
    if not is_production():
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    uvicorn.run(
        "reservas.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5009")),
        reload=not is_production(),
    )
