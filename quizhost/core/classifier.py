"""
Quiz-domain classification strategies

KeywordPrefilter screens questions locally against a fixed topic
vocabulary before any model call. ModelSelfClassify lets every question
through and relies on the model's in-band refusal.
"""
import re
from typing import FrozenSet

from quizhost.config import ClassificationPolicy


REFUSAL_TEXT = "This question is outside quiz domains. Ask a quiz-domain question."

QUIZ_DOMAINS = (
    "science, technology, AI, mathematics, history, geography, "
    "current affairs, or general knowledge"
)

MAX_ANSWER_WORDS = 35

TOPIC_KEYWORDS = frozenset({
    # science
    "science", "scientist", "physics", "chemistry", "biology", "atom", "molecule",
    "element", "cell", "gene", "dna", "energy", "gravity", "light", "planet", "star",
    "galaxy", "universe", "space", "astronaut", "evolution", "species", "vaccine",
    "disease", "medicine", "invented", "invention", "discovered", "discovery",
    # technology / AI
    "technology", "computer", "software", "hardware", "internet", "programming",
    "algorithm", "robot", "robotics", "ai", "artificial intelligence",
    "machine learning", "neural network", "chatbot", "smartphone", "processor",
    # mathematics
    "math", "maths", "mathematics", "number", "prime", "equation", "algebra",
    "geometry", "calculus", "theorem", "triangle", "fraction", "statistics",
    # history
    "history", "historical", "war", "empire", "king", "queen", "president",
    "dynasty", "revolution", "ancient", "century", "independence", "battle",
    # geography
    "geography", "country", "countries", "continent", "ocean", "river", "mountain",
    "desert", "island", "city", "population", "border", "lake", "volcano",
    # current affairs
    "current affairs", "news", "election", "minister", "government", "summit",
    "olympics", "award", "nobel",
    # general knowledge
    "general knowledge", "largest", "smallest", "tallest", "longest", "fastest",
    "oldest", "author", "wrote", "painted", "language", "currency", "national",
})


def _matches(text: str, keywords: FrozenSet[str]) -> bool:
    lowered = text.lower()
    for keyword in keywords:
        if re.search(rf"\b{re.escape(keyword)}\b", lowered):
            return True
    return False


def build_system_instruction(self_classify: bool) -> str:
    lines = ["You are an AI quiz host."]
    if self_classify:
        lines.append(f"First classify if question is in quiz domains: {QUIZ_DOMAINS}.")
    lines.append(f'If outside domain, reply exactly: "{REFUSAL_TEXT}"')
    lines.append(f"If in-domain, answer in one sentence under {MAX_ANSWER_WORDS} words and be factual.")
    lines.append("Keep tone concise and suitable for an on-stage quiz.")
    return "\n".join(lines)


def is_refusal(text: str) -> bool:
    """True if a model reply is the fixed out-of-domain refusal"""
    return text.strip().strip('"“”').strip() == REFUSAL_TEXT


class KeywordPrefilter:
    """Reject out-of-domain questions locally, without a model call"""

    policy = ClassificationPolicy.KEYWORD_PREFILTER

    def __init__(self, keywords: FrozenSet[str] = TOPIC_KEYWORDS):
        self.keywords = frozenset(k.lower() for k in keywords)
        self.system_instruction = build_system_instruction(self_classify=False)

    def in_domain(self, question: str) -> bool:
        return _matches(question, self.keywords)


class ModelSelfClassify:
    """Always call the model and trust its in-band refusal"""

    policy = ClassificationPolicy.MODEL_SELF_CLASSIFY

    def __init__(self):
        self.system_instruction = build_system_instruction(self_classify=True)

    def in_domain(self, question: str) -> bool:
        return True


def build_classifier(policy: ClassificationPolicy):
    if policy == ClassificationPolicy.KEYWORD_PREFILTER:
        return KeywordPrefilter()
    return ModelSelfClassify()
