from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cortex.config import get_settings
from cortex.errors import CortexError
from cortex.logging_config import logger, setup_logging
from cortex.middleware.rate_limit import limiter
from cortex.api.notes import router as notes_router
from cortex.api.search import router as search_router
from cortex.api.contacts import router as contacts_router
from cortex.api.dashboard import router as dashboard_router
from cortex.api.debrief import router as debrief_router
from cortex.api.seed import router as seed_router

app = FastAPI(
    title="Cortex API",
    description="Personal CRM: notes in, contacts out, ask your network",
    version="0.1.0"
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.on_event("startup")
async def startup_event():
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(f"[STARTUP] Cortex API ({settings.environment}) ready")


@app.exception_handler(CortexError)
async def cortex_error_handler(request: Request, exc: CortexError):
    logger.error(f"[ERROR] {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"[ERROR] {request.method} {request.url.path}: invalid request: {errors}")
    return JSONResponse(status_code=400, content={"detail": errors})


# CORS for the mobile/web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": "0.1.0"
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Cortex API",
        "docs": "/docs"
    }


# Include routers
app.include_router(notes_router)
app.include_router(search_router)
app.include_router(contacts_router)
app.include_router(dashboard_router)
app.include_router(debrief_router)
app.include_router(seed_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
