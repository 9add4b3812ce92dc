"""
Session store - load / normalize / save of the single session record

Persistence is whole-record overwrite. Saves may carry the version the
caller loaded; a mismatch with the stored record is rejected so the caller
can retry from a fresh load.
"""
import json
import logging
import threading
from typing import List, Optional

from quizhost.models import Question, Session, Team


logger = logging.getLogger(__name__)

SESSION_KEY = "askai_session_v2"
SESSION_ID = "session-ask-ai"
TEAM_COUNT = 6

DEFAULT_QUESTION = Question(
    id="ask-ai-main",
    text="Ask AI Round: Ask a quiz-domain question to the AI host.",
    round_type="ASK_AI",
    points=20,
    time_limit=60,
)


class StaleSessionError(Exception):
    """Raised when a save is based on an outdated version of the record"""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"session version mismatch: expected {expected}, stored {actual}")
        self.expected = expected
        self.actual = actual


def default_teams() -> List[Team]:
    return [Team(id=f"t{i + 1}", name=f"Team {i + 1}", score=0) for i in range(TEAM_COUNT)]


def default_session() -> Session:
    return Session(
        id=SESSION_ID,
        current_question=DEFAULT_QUESTION.model_copy(),
        teams=default_teams(),
    )


def _coerce_score(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def normalize_teams(raw_teams) -> List[Team]:
    """
    Reconcile a stored team list against the canonical roster

    Each canonical team is matched by name first, then by id; only the
    score is carried over. Unknown teams are dropped, missing ones restored.
    """
    stored = [t for t in (raw_teams or []) if isinstance(t, dict)]
    by_name = {t.get("name"): t for t in stored}

    teams = []
    for canonical in default_teams():
        existing = by_name.get(canonical.name)
        if existing is None:
            existing = next((t for t in stored if t.get("id") == canonical.id), None)
        score = _coerce_score(existing.get("score")) if existing else 0
        teams.append(canonical.model_copy(update={"score": score}))
    return teams


def normalize_session(raw: dict) -> Session:
    teams = normalize_teams(raw.get("teams"))
    active_team_id = raw.get("activeTeamId")
    if not any(team.id == active_team_id for team in teams):
        active_team_id = None

    record = default_session().to_record()
    record.update(raw)
    record["currentQuestion"] = DEFAULT_QUESTION.to_record()
    record["teams"] = [team.to_record() for team in teams]
    record["activeTeamId"] = active_team_id
    return Session.model_validate(record)


class SessionStore:
    """Owns the persisted session record"""

    def __init__(self, storage, key: str = SESSION_KEY):
        self.storage = storage
        self.key = key
        self._lock = threading.Lock()

    def _read(self) -> Session:
        try:
            stored = self.storage.get(self.key)
            if not stored:
                return default_session()
            raw = json.loads(stored)
            if not isinstance(raw, dict):
                raise ValueError("stored session is not a JSON object")
            return normalize_session(raw)
        except (OSError, ValueError, TypeError) as e:
            # corrupt record is treated as absent
            logger.warning(f"⚠️ Stored session unreadable, using default: {e}")
            return default_session()

    def load(self) -> Session:
        """Return the persisted record (normalized) or the default session"""
        with self._lock:
            return self._read()

    def save(self, session: Session, expected_version: Optional[int] = None) -> Session:
        """
        Persist the full record, replacing any prior value

        Args:
            session: Record to write
            expected_version: Version the caller loaded; None skips the check

        Returns:
            The saved record with its new version

        Raises:
            StaleSessionError: If the stored version differs from expected_version
        """
        with self._lock:
            current_version = self._read().version
            if expected_version is not None and expected_version != current_version:
                raise StaleSessionError(expected_version, current_version)

            saved = session.model_copy(update={"version": current_version + 1}, deep=True)
            self.storage.set(self.key, json.dumps(saved.to_record()))
            return saved
