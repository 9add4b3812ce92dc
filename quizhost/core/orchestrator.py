"""
Ask-AI orchestration pipeline

  submit_question -> PROCESSING -> classify -> generate -> ANSWERING

The pipeline never raises to its caller: every failure resolves to
ANSWERING with a fixed in-band message. The ANSWERING transition carries
the turn the question was asked in, so a result that arrives after a new
turn started is discarded.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from quizhost.core.classifier import REFUSAL_TEXT, is_refusal
from quizhost.core.session_service import SessionService
from quizhost.models import AskAiState, GroundingLink, Session


logger = logging.getLogger(__name__)

FALLBACK_TEXT = "I am having trouble connecting. Please ask again."
EMPTY_REPLY_TEXT = "I could not generate a response."


@dataclass
class Answer:
    text: str
    links: List[GroundingLink] = field(default_factory=list)


class AskAiOrchestrator:

    def __init__(self, service: SessionService, generator, classifier, media=None, use_search: bool = True):
        self.service = service
        self.generator = generator
        self.classifier = classifier
        self.media = media
        self.use_search = use_search

    def submit_question(self, text: str) -> Session:
        """
        Record the question (PROCESSING) and resolve the turn to ANSWERING
        """
        question = (text or "").strip()
        if not question:
            return self.service.get_session()

        session = self.service.set_ask_ai_state(AskAiState.PROCESSING, question=question)
        if session.ask_ai_state != AskAiState.PROCESSING:
            logger.warning("⛔ Question not accepted: no turn is open")
            return session

        logger.info(f"❓ Turn {session.turn_id} | {question}")
        return self.generate_response(question, turn_id=session.turn_id)

    def generate_response(self, question: str, turn_id: Optional[int] = None) -> Session:
        answer = self.answer(question)
        return self.service.set_ask_ai_state(
            AskAiState.ANSWERING,
            response=answer.text,
            links=answer.links,
            turn_id=turn_id,
        )

    def answer(self, question: str) -> Answer:
        """Classify and generate; never raises"""
        if not self.classifier.in_domain(question):
            logger.info("🚫 Out-of-domain question rejected locally")
            return Answer(REFUSAL_TEXT)

        if not self.generator.available:
            logger.warning("⚠️ Generative API key not configured")
            return Answer(FALLBACK_TEXT)

        try:
            result = self.generator.generate(
                prompt=f'User question: "{question}"',
                system_instruction=self.classifier.system_instruction,
                use_search=self.use_search,
            )
        except Exception as e:
            # every failure resolves to the fallback reply
            logger.error(f"❌ Generation failed: {type(e).__name__}: {e}", exc_info=True)
            return Answer(FALLBACK_TEXT)

        text = (result.text or "").strip()
        if not text:
            return Answer(EMPTY_REPLY_TEXT)
        if is_refusal(text):
            return Answer(REFUSAL_TEXT)

        links = [link for link in result.citations if link.uri]
        logger.info(f"🤖 Answer ready | {len(links)} grounding links")
        return Answer(text, links)

    def transcribe(self, audio: bytes, mime_type: str = "audio/webm") -> Optional[str]:
        if self.media is None:
            return None
        return self.media.transcribe(audio, mime_type)
