"""Wellness Scores API - FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routes import scores, goals

settings = get_settings()

app = FastAPI(
    title="Wellness Scores API",
    description="Survey scores and goal tracking for the wellness dashboard",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(scores.router)
app.include_router(goals.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "scores-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.scores_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
