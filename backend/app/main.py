"""
Content CMS - Backend API
Admin API for the Disruptive / Ecoshift / VAH websites: products, blogs,
FAQs, popups, projects, recycle bin and audit logs
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from app.core.config import settings
from app.core.auth import get_current_user
from app.core.exceptions import CMSException

# Import API routers
from app.api import (
    activity, audit, blogs, bulk_upload, faqs, master_data, popups, product_forms,
    products, projects, recycle_bin, uploads,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
)

# Configure CORS with both specific origins and Vercel regex pattern
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https://.*\.vercel\.app",  # Allow all Vercel preview/production deployments
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.exception_handler(CMSException)
async def cms_exception_handler(request: Request, exc: CMSException):
    """Domain errors carry their own status code"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "detail": exc.message, **exc.details},
    )


# Include API routers (all but activity behind a signed-in user)
authenticated = [Depends(get_current_user)]

app.include_router(audit.router, prefix="/api/v1/audit-logs", tags=["Audit Logs"], dependencies=authenticated)
app.include_router(activity.router, prefix="/api/v1/activity", tags=["Activity"])
app.include_router(blogs.router, prefix="/api/v1/blogs", tags=["Blogs"], dependencies=authenticated)
app.include_router(faqs.router, prefix="/api/v1/faqs", tags=["FAQs"], dependencies=authenticated)
app.include_router(popups.router, prefix="/api/v1/popups", tags=["Popups"], dependencies=authenticated)
app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"], dependencies=authenticated)
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"], dependencies=authenticated)
app.include_router(recycle_bin.router, prefix="/api/v1/recycle-bin", tags=["Recycle Bin"], dependencies=authenticated)
app.include_router(bulk_upload.router, prefix="/api/v1/bulk-upload", tags=["Bulk Upload"], dependencies=authenticated)
app.include_router(product_forms.router, prefix="/api/v1/product-forms", tags=["Product Forms"], dependencies=authenticated)
app.include_router(master_data.router, prefix="/api/v1/master-data", tags=["Master Data"], dependencies=authenticated)
app.include_router(uploads.router, prefix="/api/v1/uploads", tags=["Uploads"], dependencies=authenticated)


@app.get("/")
async def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION
    }


@app.get("/health")
async def health():
    """Health check endpoint para monitoreo (configuration only, no Firestore round-trip)"""
    return {
        "status": "healthy",
        "service": "cms-api",
        "version": settings.API_VERSION,
        "firebase": {
            "project_id": settings.FIREBASE_PROJECT_ID,
            "credentials_file_configured": bool(settings.FIREBASE_CREDENTIALS_FILE)
        },
        "cloudinary": {
            "configured": settings.cloudinary_configured
        }
    }
