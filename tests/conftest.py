"""
Shared fixtures and fakes for the external services
"""
import pytest

from quizhost.core.session_service import SessionService
from quizhost.core.session_store import SessionStore
from quizhost.core.storage import MemoryStorage
from quizhost.models import GenerationResult


class FakeClock:
    """Millisecond clock advanced by hand"""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeGenerator:
    """Stands in for GeminiClient.generate"""

    def __init__(self, reply=None, error=None, available=True, on_call=None):
        self.reply = reply if reply is not None else GenerationResult(text="")
        self.error = error
        self.available = available
        self.on_call = on_call
        self.calls = []

    def generate(self, prompt, system_instruction, use_search=True):
        self.calls.append({"prompt": prompt, "system_instruction": system_instruction, "use_search": use_search})
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.reply


class FakeTTS:
    def __init__(self, available=True, error=None):
        self.available = available
        self.error = error
        self.calls = []

    def synthesize(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        return f"data:audio/mpeg;base64,{len(self.calls)}"


class FakeSTT:
    def __init__(self, transcript="Who painted the Mona Lisa?", available=True, error=None):
        self.transcript = transcript
        self.available = available
        self.error = error
        self.calls = []

    def transcribe(self, audio, mime_type="audio/webm"):
        self.calls.append((audio, mime_type))
        if self.error:
            raise self.error
        return self.transcript


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return SessionStore(storage)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(store, clock):
    return SessionService(store, clock=clock)
