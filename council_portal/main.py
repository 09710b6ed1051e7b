from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import datetime
import os
import logging

from council_portal import __version__
from council_portal.config import settings
from council_portal.database import check_connection
from council_portal.routes import users_router, noc_router

# Enable logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Init app
app = FastAPI(
    title="TSDC Portal Backend",
    description="Telangana State Dental Council - Registration and NOC API",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600
)


def mount_local_uploads(application: FastAPI) -> bool:
    """Serve local document copies read-only, only when they are the authoritative store."""
    if settings.cloudinary_configured:
        logger.info("Cloudinary is the document store - /uploads is not served")
        return False
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    application.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
    return True


mount_local_uploads(app)

routers = [
    users_router,
    noc_router
]

for router in routers:
    app.include_router(router)
    logger.info(f"Included router: {router.prefix}")


@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "ok",
        "message": "Welcome to the TSDC Portal API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": [
            "/api/users/* - Registration, authentication and reference data",
            "/api/noc - No Objection Certificate applications",
            "/health - System health check"
        ]
    }


@app.get("/health", include_in_schema=False)
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.datetime.now().isoformat(),
        "environment": settings.ENVIRONMENT
    }


# Malformed or missing JSON bodies use the same error shape as service validation
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [str(error["loc"][-1]) for error in exc.errors() if error.get("loc")]
    logger.warning(f"Rejected malformed request to {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "error": "MISSING_FIELD",
                "message": f"Missing or invalid fields: {', '.join(fields) or 'body'}"
            }
        }
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info("🚀 TSDC Portal Backend starting up...")
    check_connection()
    logger.info(f"📁 Upload directory: {os.path.abspath(settings.UPLOAD_DIR)}")
    logger.info(f"☁️  Remote document storage: {'Cloudinary' if settings.cloudinary_configured else 'disabled (local only)'}")
    logger.info(f"🌐 CORS enabled for origins: {settings.cors_origins_list}")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("🛑 TSDC Portal Backend shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "council_portal.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
