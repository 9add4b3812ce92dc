"""
Session service - Ask-AI state machine over the shared session record

  IDLE --select team--> (IDLE) --enable mic--> LISTENING
  LISTENING --question submitted--> PROCESSING
  PROCESSING --model complete--> ANSWERING
  ANSWERING --judge--> COMPLETED
  COMPLETED --select team / enable mic--> LISTENING

Every operation is load -> mutate -> save of the whole record. Saves carry
the loaded version; a conflicting save is retried from a fresh load.
Invalid input never raises: the current record is returned unchanged.
"""
import logging
import time
from typing import Callable, List, Optional

from quizhost.config import RejudgePolicy
from quizhost.core.session_store import SessionStore, StaleSessionError, default_session
from quizhost.models import AskAiState, GroundingLink, QuizStatus, Session, Verdict


logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class SessionService:

    def __init__(
        self,
        store: SessionStore,
        rejudge_policy: RejudgePolicy = RejudgePolicy.REAPPLY,
        max_retries: int = 3,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.rejudge_policy = rejudge_policy
        self.max_retries = max(1, max_retries)
        self.clock = clock

    def _mutate(self, action: str, mutator: Callable[[Session], bool]) -> Session:
        """
        Apply mutator to a freshly loaded record and save it

        The mutator returns False to signal a no-op, in which case nothing
        is written and the loaded record is returned.
        """
        for attempt in range(1, self.max_retries + 1):
            session = self.store.load()
            if not mutator(session):
                return session
            try:
                return self.store.save(session, expected_version=session.version)
            except StaleSessionError as e:
                logger.warning(f"🔁 {action}: {e} (attempt {attempt}/{self.max_retries})")

        logger.error(f"❌ {action}: gave up after {self.max_retries} conflicting saves")
        return self.store.load()

    def get_session(self) -> Session:
        return self.store.load()

    def update_status(self, status: QuizStatus) -> Session:
        def apply(session: Session) -> bool:
            session.status = status
            if status == QuizStatus.LIVE:
                stamp = self.clock()
                session.start_time = stamp
                session.turn_start_time = stamp
            return True

        session = self._mutate("update_status", apply)
        logger.info(f"📺 Status -> {session.status.value}")
        return session

    def reset_session(self) -> Session:
        """Default session with team identities kept and every score zeroed"""
        def apply(session: Session) -> bool:
            fresh = default_session()
            session.status = fresh.status
            session.start_time = None
            session.turn_start_time = fresh.turn_start_time
            session.active_team_id = None
            session.teams = [team.model_copy(update={"score": 0}) for team in session.teams]
            session.ask_ai_state = AskAiState.IDLE
            session.clear_turn()
            session.turn_id += 1
            return True

        session = self._mutate("reset_session", apply)
        logger.info("🔄 Session reset, scores zeroed")
        return session

    def set_active_team(self, team_id: str) -> Session:
        def apply(session: Session) -> bool:
            if session.find_team(team_id) is None:
                return False
            session.active_team_id = team_id
            session.ask_ai_state = AskAiState.IDLE
            session.clear_turn()
            session.turn_start_time = self.clock()
            session.turn_id += 1
            return True

        session = self._mutate("set_active_team", apply)
        if session.active_team_id == team_id:
            logger.info(f"🎤 Active team -> {team_id} (turn {session.turn_id})")
        return session

    def set_ask_ai_state(
        self,
        state: AskAiState,
        question: Optional[str] = None,
        response: Optional[str] = None,
        links: Optional[List[GroundingLink]] = None,
        turn_id: Optional[int] = None,
    ) -> Session:
        """
        Move the Ask-AI state machine

        Entering LISTENING starts a new turn and clears the previous
        question, response, verdict and links. Provided payload fields are
        merged; omitted ones keep their prior values.

        Args:
            state: Target state (COMPLETED is reachable only via judge_ask_ai)
            question: Question text to record
            response: Answer text to record
            links: Grounding links to record
            turn_id: Turn the caller started from; a mismatch discards the call
        """
        def apply(session: Session) -> bool:
            if turn_id is not None and turn_id != session.turn_id:
                logger.warning(
                    f"⏭️ Discarding {state.value} for stale turn {turn_id} (current {session.turn_id})"
                )
                return False
            if state == AskAiState.COMPLETED:
                return False
            if state == AskAiState.LISTENING and session.active_team_id is None:
                return False
            # PROCESSING / ANSWERING only follow an opened turn
            if state not in (AskAiState.IDLE, AskAiState.LISTENING) and session.ask_ai_state == AskAiState.IDLE:
                return False

            session.ask_ai_state = state
            session.ask_ai_verdict = None
            if state == AskAiState.LISTENING:
                session.clear_turn()
                session.turn_id += 1

            if question:
                session.current_ask_ai_question = question
            if response:
                session.current_ask_ai_response = response
            if links is not None:
                session.grounding_urls = list(links)
            return True

        return self._mutate("set_ask_ai_state", apply)

    def judge_ask_ai(self, verdict: Verdict) -> Session:
        """
        Record the judge's verdict; an AI_WRONG verdict scores the active team
        """
        scored = []

        def apply(session: Session) -> bool:
            scored.clear()
            if (
                self.rejudge_policy == RejudgePolicy.IGNORE
                and session.ask_ai_state == AskAiState.COMPLETED
            ):
                return False

            session.ask_ai_state = AskAiState.COMPLETED
            session.ask_ai_verdict = verdict

            if verdict == Verdict.AI_WRONG:
                team = session.find_team(session.active_team_id)
                if team is not None:
                    points = session.current_question.points if session.current_question else 0
                    team.score += points
                    scored.append((team.id, points))
            return True

        session = self._mutate("judge_ask_ai", apply)
        if scored:
            team_id, points = scored[0]
            logger.info(f"⚖️ {verdict.value} | +{points} to {team_id}")
        else:
            logger.info(f"⚖️ {verdict.value} | no points awarded")
        return session
