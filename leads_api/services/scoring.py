"""Priority/intent scoring from classified call signals."""

from dataclasses import dataclass

from leads_api.config import ScoringWeights
from leads_api.services.classification import (
    TIMELINE_DEFAULT_URGENCY,
    explicit_urgency,
    has_strong_intent,
)


@dataclass
class CallSignals:
    text: str
    buyer_seller: str | None = None
    timeline: str | None = None
    sentiment: str | None = None
    call_successful: bool = False


@dataclass
class ScoreResult:
    priority_score: int
    intent_score: int
    urgency: str


def clamp_score(value: float) -> int:
    return max(0, min(100, int(value)))


def score_call(signals: CallSignals, weights: ScoringWeights) -> ScoreResult:
    """
    Apply the weight table to a call's signals.

    Scores are clamped to [0, 100] only after every adjustment, so the order
    of the additions does not matter.
    """
    priority = weights.base_priority
    intent = weights.base_intent

    if signals.buyer_seller:
        priority += weights.classified_priority
        intent += weights.classified_intent

    if signals.timeline:
        priority += weights.timeline_priority.get(signals.timeline, 0)
        intent += weights.timeline_intent.get(signals.timeline, 0)

    if has_strong_intent(signals.text):
        intent += weights.strong_intent

    sentiment = (signals.sentiment or "").strip().lower()
    if sentiment == "positive":
        priority += weights.positive_sentiment_priority
    elif sentiment == "negative":
        priority += weights.negative_sentiment_priority

    if signals.call_successful:
        priority += weights.successful_call_priority
        intent += weights.successful_call_intent

    urgency = (
        explicit_urgency(signals.text)
        or TIMELINE_DEFAULT_URGENCY.get(signals.timeline or "")
        or "medium"
    )

    return ScoreResult(
        priority_score=clamp_score(priority),
        intent_score=clamp_score(intent),
        urgency=urgency,
    )
