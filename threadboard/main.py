from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from threadboard.core.config import settings
from threadboard.db.init_db import create_all_tables
from threadboard.middleware.request_logging import RequestLoggingMiddleware
from threadboard.middleware.auth_logging import AuthLoggingMiddleware
from threadboard.modules.auth.api.router import router as auth_router
from threadboard.modules.posts.api.router import router as posts_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("threadboard")

# Initialize the FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    debug=settings.DEBUG,
    description="Threaded posting service with JWT authentication",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
    create_all_tables()

# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(AuthLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(auth_router, prefix=f"{settings.API_PREFIX}/auth", tags=["authentication"])
app.include_router(posts_router, prefix=f"{settings.API_PREFIX}/posts", tags=["posts"])

@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "documentation": "/docs" if settings.DEBUG else None,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("threadboard.main:app", host="0.0.0.0", port=8000, reload=True)
