"""
Tests for the Ask-AI answer pipeline
"""
import requests

from conftest import FakeGenerator
from quizhost.core.classifier import REFUSAL_TEXT, KeywordPrefilter, ModelSelfClassify
from quizhost.core.orchestrator import EMPTY_REPLY_TEXT, FALLBACK_TEXT, AskAiOrchestrator
from quizhost.models import AskAiState, GenerationResult, GroundingLink


OUT_OF_DOMAIN = "What's the capital of Mars colonization budget gossip?"


def _ready(service, team_id="t1"):
    service.set_active_team(team_id)
    service.set_ask_ai_state(AskAiState.LISTENING)


def _orchestrator(service, generator, classifier=None):
    return AskAiOrchestrator(service, generator=generator, classifier=classifier or ModelSelfClassify())


def test_out_of_domain_rejected_locally_by_keyword_prefilter(service):
    generator = FakeGenerator(reply=GenerationResult(text="should not be used"))
    orchestrator = _orchestrator(service, generator, KeywordPrefilter())
    _ready(service)

    session = orchestrator.submit_question(OUT_OF_DOMAIN)

    assert session.ask_ai_state == AskAiState.ANSWERING
    assert session.current_ask_ai_question == OUT_OF_DOMAIN
    assert session.current_ask_ai_response == REFUSAL_TEXT
    assert session.grounding_urls == []
    assert generator.calls == []


def test_out_of_domain_refused_by_model(service):
    reply = GenerationResult(
        text=f'"{REFUSAL_TEXT}"\n',
        citations=[GroundingLink(title="gossip", uri="https://example.org/gossip")],
    )
    generator = FakeGenerator(reply=reply)
    orchestrator = _orchestrator(service, generator)
    _ready(service)

    session = orchestrator.submit_question(OUT_OF_DOMAIN)

    assert session.ask_ai_state == AskAiState.ANSWERING
    assert session.current_ask_ai_response == REFUSAL_TEXT
    assert session.grounding_urls == []
    assert len(generator.calls) == 1


def test_in_domain_answer_with_grounding_links(service):
    reply = GenerationResult(
        text="Alexander Fleming discovered penicillin in 1928.",
        citations=[
            GroundingLink(title="Britannica", uri="https://example.org/fleming"),
            GroundingLink(title="No link", uri=""),
        ],
    )
    generator = FakeGenerator(reply=reply)
    orchestrator = _orchestrator(service, generator, KeywordPrefilter())
    _ready(service)

    session = orchestrator.submit_question("  Who discovered penicillin?  ")

    assert session.ask_ai_state == AskAiState.ANSWERING
    assert session.current_ask_ai_question == "Who discovered penicillin?"
    assert session.current_ask_ai_response == "Alexander Fleming discovered penicillin in 1928."
    assert [link.uri for link in session.grounding_urls] == ["https://example.org/fleming"]


def test_model_request_shape(service):
    generator = FakeGenerator(reply=GenerationResult(text="Paris."))
    orchestrator = _orchestrator(service, generator)
    _ready(service)

    orchestrator.submit_question("What is the capital of France?")

    call = generator.calls[0]
    assert call["prompt"] == 'User question: "What is the capital of France?"'
    assert REFUSAL_TEXT in call["system_instruction"]
    assert "under 35 words" in call["system_instruction"]
    assert call["use_search"] is True


def test_generation_exception_falls_back_to_apology(service):
    generator = FakeGenerator(error=requests.ConnectionError("network down"))
    orchestrator = _orchestrator(service, generator)
    _ready(service)

    session = orchestrator.submit_question("Who wrote Hamlet?")

    assert session.ask_ai_state == AskAiState.ANSWERING
    assert session.current_ask_ai_response == FALLBACK_TEXT
    assert session.grounding_urls == []


def test_unexpected_exception_never_escapes(service):
    generator = FakeGenerator(error=KeyError("candidates"))
    orchestrator = _orchestrator(service, generator)
    _ready(service)

    session = orchestrator.submit_question("Who wrote Hamlet?")

    assert session.ask_ai_state == AskAiState.ANSWERING
    assert session.current_ask_ai_response == FALLBACK_TEXT


def test_missing_credential_falls_back_without_call(service):
    generator = FakeGenerator(available=False)
    orchestrator = _orchestrator(service, generator)
    _ready(service)

    session = orchestrator.submit_question("Who wrote Hamlet?")

    assert session.ask_ai_state == AskAiState.ANSWERING
    assert session.current_ask_ai_response == FALLBACK_TEXT
    assert generator.calls == []


def test_empty_model_reply(service):
    orchestrator = _orchestrator(service, FakeGenerator(reply=GenerationResult(text="  ")))
    _ready(service)

    session = orchestrator.submit_question("Who wrote Hamlet?")

    assert session.current_ask_ai_response == EMPTY_REPLY_TEXT


def test_blank_question_is_ignored(service):
    generator = FakeGenerator()
    orchestrator = _orchestrator(service, generator)
    _ready(service)

    session = orchestrator.submit_question("   ")

    assert session.ask_ai_state == AskAiState.LISTENING
    assert generator.calls == []


def test_question_without_open_turn_is_not_processed(service):
    generator = FakeGenerator(reply=GenerationResult(text="Paris."))
    orchestrator = _orchestrator(service, generator)
    service.set_active_team("t1")  # mic not enabled yet

    session = orchestrator.submit_question("What is the capital of France?")

    assert session.ask_ai_state == AskAiState.IDLE
    assert generator.calls == []


def test_stale_answer_is_discarded_after_new_turn(service):
    """Admin moves to the next team while the model call is outstanding"""
    def next_team_selected():
        service.set_active_team("t2")
        service.set_ask_ai_state(AskAiState.LISTENING)

    generator = FakeGenerator(reply=GenerationResult(text="Late answer."), on_call=next_team_selected)
    orchestrator = _orchestrator(service, generator)
    _ready(service, "t1")

    session = orchestrator.submit_question("Who wrote Hamlet?")

    assert session.active_team_id == "t2"
    assert session.ask_ai_state == AskAiState.LISTENING
    assert session.current_ask_ai_question is None
    assert session.current_ask_ai_response is None


def test_transcribe_without_media_service(service):
    orchestrator = _orchestrator(service, FakeGenerator())
    assert orchestrator.transcribe(b"audio") is None
