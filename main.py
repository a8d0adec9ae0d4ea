#!/usr/bin/env python3
"""
GenAI Clients API
=================

HTTP front end for the generative AI vendor clients.

Features:
- Chat: OpenAI chat completions, model listing, batch quizzes
- Image: Stability AI SDXL text-to-image
- Jobs: Picogen job submission, polling and result download
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from genai_clients import __version__
from genai_clients.routes import chat_routes, image_routes, job_routes

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="GenAI Clients API",
    version=__version__,
    description="OpenAI, Stability AI and Picogen clients over HTTP",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Include routers
app.include_router(chat_routes.router, prefix="/ai", tags=["Chat"])
app.include_router(image_routes.router, prefix="/ai", tags=["Image"])
app.include_router(job_routes.router, prefix="/ai", tags=["Jobs"])


# Health check
@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "genai-clients",
        "version": __version__
    }


@app.get("/")
def root():
    """Root endpoint with API info"""
    return {
        "service": "GenAI Clients API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "chat": [
                "GET /ai/chat/models",
                "POST /ai/chat",
                "POST /ai/quiz"
            ],
            "image": [
                "GET /ai/stability/balance",
                "GET /ai/stability/engines",
                "POST /ai/stability/generate"
            ],
            "jobs": [
                "POST /ai/picogen/jobs",
                "GET /ai/picogen/jobs/{job_id}",
                "GET /ai/picogen/jobs"
            ]
        }
    }


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if app.debug else "An error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8003,
        reload=True,
        log_level="info"
    )
