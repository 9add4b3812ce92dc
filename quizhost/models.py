"""
Data models for the Ask-AI quiz host
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class QuizStatus(str, Enum):
    PREVIEW = "PREVIEW"
    LIVE = "LIVE"
    LOCKED = "LOCKED"
    REVEALED = "REVEALED"


class AskAiState(str, Enum):
    IDLE = "IDLE"
    LISTENING = "LISTENING"
    PROCESSING = "PROCESSING"
    ANSWERING = "ANSWERING"
    COMPLETED = "COMPLETED"


class Verdict(str, Enum):
    AI_CORRECT = "AI_CORRECT"
    AI_WRONG = "AI_WRONG"


class RecordModel(BaseModel):
    """Base for models persisted as camelCase JSON (the shape the front ends read)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Question(RecordModel):
    """The round's fixed prompt"""
    id: str
    text: str
    round_type: str = "ASK_AI"
    points: int = 20          # awarded to the team when the AI is judged wrong
    time_limit: int = 60      # seconds


class Team(RecordModel):
    id: str
    name: str
    score: int = Field(default=0, ge=0)


class GroundingLink(RecordModel):
    """Citation attached to a generated answer"""
    title: str = ""
    uri: str


class Session(RecordModel):
    """The single shared session record"""
    id: str
    current_question: Optional[Question] = None
    status: QuizStatus = QuizStatus.PREVIEW
    start_time: Optional[int] = None          # epoch ms
    turn_start_time: int = 0                  # epoch ms
    active_team_id: Optional[str] = None
    teams: List[Team] = Field(default_factory=list)
    ask_ai_state: AskAiState = AskAiState.IDLE
    current_ask_ai_question: Optional[str] = None
    current_ask_ai_response: Optional[str] = None
    ask_ai_verdict: Optional[Verdict] = None
    grounding_urls: List[GroundingLink] = Field(default_factory=list)
    version: int = 0                          # bumped by every save
    turn_id: int = 0                          # bumped whenever a new turn starts

    def find_team(self, team_id: Optional[str]) -> Optional[Team]:
        if not team_id:
            return None
        return next((team for team in self.teams if team.id == team_id), None)

    def clear_turn(self) -> None:
        """Drop the in-flight question, answer, verdict and citations"""
        self.current_ask_ai_question = None
        self.current_ask_ai_response = None
        self.ask_ai_verdict = None
        self.grounding_urls = []


class GenerationResult(BaseModel):
    """Reply from the generative text API"""
    text: str = ""
    citations: List[GroundingLink] = Field(default_factory=list)
