import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from src.core.logging_config import setup_logging
from src.routers import roles as roles_router

# Configure logging VERY early
setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Role Breakdown Engine - Main API")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)

# --- Include Routers ---
app.include_router(roles_router.router, prefix="/api/v1", tags=["roles"])


@app.get("/health", tags=["Health Check"])
async def health_check():
    """
    Basic liveness check.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    # Better to run with `uvicorn main:app --reload` from the project root directory
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
