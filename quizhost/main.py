"""
FastAPI main application
Ask-AI Quiz Host - shared session for the admin console, public display
and team clients

Modular architecture with separated API routers in quizhost/api/:
- health.py: Health check and capability status
- session.py: Session snapshot polled by every front end
- admin.py: Session control (status, team selection, mic, judging, reset, purge)
- askai.py: Question submission, transcription, speech synthesis
- leaderboard.py: Scoreboard data for the public display
- config.py: Non-secret configuration

All routers access the wired components via the quizhost.state module.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from quizhost import state
from quizhost.config import load_settings

# Import all API routers
from quizhost.api import health, session, admin, askai, leaderboard
from quizhost.api import config as config_router


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    settings = load_settings()
    state.init(settings)
    logger.info(
        f"✅ Quiz host started | storage={settings.storage_dir} "
        f"| classification={settings.classification_policy.value}"
    )

    yield

    logger.info("🛑 Quiz host shutting down")


app = FastAPI(
    title="Ask-AI Quiz Host",
    description="Session state machine and AI answer pipeline for the Ask-AI trivia round",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware (front ends are served from other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== INCLUDE ROUTERS ====================

# Health check (GET /)
app.include_router(health.router)

# Session snapshot (GET /api/session)
app.include_router(session.router)

# Admin endpoints (POST /admin/status, /admin/active-team, /admin/judge, ...)
app.include_router(admin.router)

# Ask-AI endpoints (POST /ask-ai/question, /ask-ai/transcribe, /ask-ai/tts)
app.include_router(askai.router)

# Leaderboard endpoint (GET /api/leaderboard-data)
app.include_router(leaderboard.router)

# Config endpoint (GET /config)
app.include_router(config_router.router)


# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
