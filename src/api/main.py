from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import learning
from src.logging import configure_logging, get_logger
from src.services.config import load_config_with_main

logger = get_logger("API")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle management
    Gracefully handle startup and shutdown events, avoid CancelledError
    """
    log_dir = configure_logging()
    logger.info(f"Application startup (log_dir={log_dir})")

    # Open the session store early so a bad storage path fails fast.
    try:
        from src.services.storage import get_session_store

        store = get_session_store()
        logger.info(f"Session store initialized: {store.db_path}")
    except Exception as e:
        logger.error(f"Storage initialization failed: {e}")
        raise

    try:
        from src.services.llm import get_llm_config

        llm_config = get_llm_config()
        logger.info(f"LLM configured: binding={llm_config.binding}, model={llm_config.model}")
    except Exception as e:
        logger.warning(f"LLM configuration incomplete at startup: {e}")

    yield
    logger.info("Application shutdown")


app = FastAPI(
    title="Cognitive Tutor API",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific frontend origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(learning.router, prefix="/api/v1/learning", tags=["learning"])


@app.get("/")
async def root():
    return {"message": "Welcome to Cognitive Tutor API"}


if __name__ == "__main__":
    import os

    import uvicorn

    server_cfg = load_config_with_main().get("server", {})
    uvicorn.run(
        "src.api.main:app",
        host=server_cfg.get("host", "0.0.0.0"),
        port=int(os.getenv("BACKEND_PORT") or server_cfg.get("port", 8001)),
    )
