"""
Cognitive Core Diagnostics API

FastAPI application exposing one CognitiveEngine per process:
- POST /actions → 204 (no body)
- GET /state → JSON snapshot of every slice
- GET /metrics → sliding-window SessionMetrics
- POST /reset → 204 (no body)

Dispatch is synchronous; async endpoints keep every dispatch on the event
loop thread, so actions are applied one at a time.
"""

from contextlib import asynccontextmanager
import logging
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from cognitive_core.config import CognitiveConfig
from cognitive_core.engine import CognitiveEngine
from cognitive_core.schemas.inputs import Action
from cognitive_core.store.errors import MalformedActionError, ReentrantDispatchError


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# Application State
# =============================================================================

class AppState:
    """Application state container."""
    engine: Optional[CognitiveEngine] = None


state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Cognitive Core API...")
    load_dotenv()
    config = CognitiveConfig.from_env()
    if config.debug_mode:
        logging.getLogger("cognitive_core").setLevel(logging.DEBUG)
    state.engine = CognitiveEngine(config)
    logger.info("Cognitive Core ready")

    yield

    # Shutdown
    logger.info("Shutting down Cognitive Core API...")
    state.engine.destroy()
    state.engine = None


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Cognitive Core",
    description="Behavioral state inference for navigation interfaces",
    version=API_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": API_VERSION}


# =============================================================================
# Ingestion (HTTP 204)
# =============================================================================

@app.post("/actions", status_code=status.HTTP_204_NO_CONTENT)
async def dispatch_action(action: Action):
    """
    Dispatch one interaction action.

    - Body is validated as an Action (422 when ``type`` is missing)
    - Runs the classifier and reducers synchronously
    - Never returns the inferred state; read it from /state
    """
    try:
        state.engine.dispatch(action)
    except MalformedActionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ReentrantDispatchError as e:
        logger.error(f"Dispatch contract violation: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal error dispatching action"
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Read-only Diagnostics
# =============================================================================

@app.get("/state")
async def get_state() -> Dict[str, Any]:
    """Serialisable snapshot of every state slice."""
    return state.engine.snapshot()


@app.get("/metrics")
async def get_metrics(window: Optional[int] = Query(None, ge=1)) -> Dict[str, Any]:
    """Session metrics over the latest ``window`` records (default: config)."""
    return state.engine.get_metrics(window).model_dump(by_alias=True)


@app.get("/classifier")
async def get_classifier() -> Dict[str, Any]:
    """Classifier internals: signals, history occupancy, error clusters."""
    return state.engine.classifier.get_snapshot()


@app.post("/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset():
    """Clear session history and return to the neutral state."""
    state.engine.reset()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
