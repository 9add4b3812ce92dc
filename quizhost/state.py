"""
Global application state
Component instances wired at startup and shared by all routers
"""
from typing import Optional

from quizhost.config import Settings
from quizhost.core.classifier import build_classifier
from quizhost.core.media_cache import MediaCache
from quizhost.core.orchestrator import AskAiOrchestrator
from quizhost.core.session_service import SessionService
from quizhost.core.session_store import SessionStore
from quizhost.core.storage import FileStorage
from quizhost.services.elevenlabs import ElevenLabsClient
from quizhost.services.gemini import GeminiClient
from quizhost.services.media import MediaService

SETTINGS: Optional[Settings] = None

SESSION_SERVICE: Optional[SessionService] = None

ORCHESTRATOR: Optional[AskAiOrchestrator] = None

MEDIA: Optional[MediaService] = None


def init(settings: Settings, storage=None) -> None:
    """Build and publish the component graph for the given settings"""
    global SETTINGS, SESSION_SERVICE, ORCHESTRATOR, MEDIA

    storage = storage if storage is not None else FileStorage(settings.storage_dir)
    timeout = settings.request_timeout_seconds

    gemini = GeminiClient(settings.gemini, timeout_seconds=timeout)
    elevenlabs = ElevenLabsClient(settings.elevenlabs, timeout_seconds=timeout)

    SETTINGS = settings
    SESSION_SERVICE = SessionService(
        SessionStore(storage),
        rejudge_policy=settings.rejudge_policy,
        max_retries=settings.max_save_retries,
    )
    MEDIA = MediaService(MediaCache(storage), elevenlabs, gemini, tts_max_chars=settings.tts_max_chars)
    ORCHESTRATOR = AskAiOrchestrator(
        SESSION_SERVICE,
        generator=gemini,
        classifier=build_classifier(settings.classification_policy),
        media=MEDIA,
        use_search=settings.use_search_grounding,
    )
