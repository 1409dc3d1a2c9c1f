import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.logging_config import setup_logging
from .core.object_storage import get_blob_store
from .core.db import engine
from .core.config import settings

# Import the Base object and all models to ensure they are registered with SQLAlchemy's metadata
from .models import Base
from .services.exceptions import AuthorizationError, NotFoundError, ValidationError


# Set up logging as the first step
setup_logging()
logger = logging.getLogger(__name__)

def create_tables():
    """
    Creates all database tables based on the current models.
    This is a non-destructive operation: it only creates tables that do not already exist.
    """
    logger.info("Ensuring all database tables exist...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables checked.")

app = FastAPI(
    title="Manupedia Manuscript Platform",
    description="Backend services for uploading, searching and moderating manuscripts.",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
def on_startup():
    """
    Actions to perform on application startup.
    """
    logger.info("Application is starting up...")

    # 1. Ensure database tables are created
    create_tables()

    # 2. Ensure the image store (directory or bucket) exists
    get_blob_store().ensure_ready()
    logger.info("Startup actions finished.")


# --- Error mapping ---

@app.exception_handler(ValidationError)
def handle_validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})

@app.exception_handler(NotFoundError)
def handle_not_found_error(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})

@app.exception_handler(AuthorizationError)
def handle_authorization_error(request: Request, exc: AuthorizationError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": exc.message})


@app.get("/", tags=["Root"])
def read_root():
    """
    A simple health check endpoint.
    """
    return {"status": "ok", "message": "Welcome to Manupedia Backend!"}

from .routers import manuscripts, admin, users

app.include_router(manuscripts.router, prefix="/api/manuscripts", tags=["Manuscripts"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
