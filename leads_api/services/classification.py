"""
Keyword/regex classification of call text.

Each rule table is ordered: the first rule whose pattern matches wins. All
patterns are case-insensitive.
"""

import re
from typing import NamedTuple


class Rule(NamedTuple):
    pattern: re.Pattern
    label: str


def _rule(pattern: str, label: str) -> Rule:
    return Rule(re.compile(pattern, re.IGNORECASE), label)


# buyer > seller > renter
BUYER_SELLER_RULES: tuple[Rule, ...] = (
    _rule(r"\b(buy|buying|buyer|purchase|purchasing)\b|looking to (buy|purchase)", "buyer"),
    _rule(r"\b(sell|selling|seller|listing)\b|list (my|our) (home|house|property)", "seller"),
    _rule(r"\b(rent|renting|renter|lease|leasing|tenant)\b", "renter"),
)

_NUM_0_3 = r"(one|two|three|1|2|3|a|a couple of|a few)"
_NUM_3_6 = r"(three|four|five|six|3|4|5|6)"
_NUM_6_12 = r"(six|seven|eight|nine|ten|eleven|twelve|6|7|8|9|10|11|12)"
_TO = r"\s*(-|–|to)\s*"

# Most urgent first. "today"/"tomorrow" only count next to an action verb,
# since agent greetings ("how can I help you today?") use them too.
TIMELINE_RULES: tuple[Rule, ...] = (
    _rule(
        r"\b(asap|immediately|right away|urgent(ly)?|this week(end)?|as soon as possible|"
        r"(move|buy|sell|close|start)\w*\s+(by\s+)?(today|tomorrow))\b",
        "ASAP",
    ),
    _rule(
        rf"\b(next month|this month|next few weeks|in a few weeks|(30|60|90) days|"
        rf"(0|zero){_TO}(3|three) months|{_NUM_0_3} months?)\b",
        "0-3 months",
    ),
    _rule(
        rf"\b({_NUM_3_6}{_TO}{_NUM_3_6} months|(four|five|six|4|5|6) months|"
        rf"next few months|half a year|later this year)\b",
        "3-6 months",
    ),
    _rule(
        rf"\b({_NUM_6_12}{_TO}{_NUM_6_12} months|"
        rf"(seven|eight|nine|ten|eleven|twelve|7|8|9|10|11|12) months|"
        rf"next year|within a year|in a year|end of (the )?year)\b",
        "6-12 months",
    ),
)

TIMELINE_DEFAULT_URGENCY: dict[str, str] = {
    "ASAP": "high",
    "0-3 months": "high",
    "3-6 months": "medium",
    "6-12 months": "low",
}

STRONG_INTENT_PATTERN = re.compile(
    r"\b(buy|purchase) a (house|home|property)\b|ready to (buy|purchase|make an offer)|"
    r"\bpre-?approved\b",
    re.IGNORECASE,
)

# Explicit urgency cues, independent of the timeline bucket
URGENCY_RULES: tuple[Rule, ...] = (
    _rule(r"\b(urgent(ly)?|emergency|as soon as possible|asap)\b", "high"),
    _rule(r"\b(no rush|not in a hurry|just (browsing|looking)|no hurry)\b", "low"),
)


def first_match(rules: tuple[Rule, ...], text: str | None) -> str | None:
    """Label of the first rule matching `text`, or None."""
    if not text:
        return None
    for rule in rules:
        if rule.pattern.search(text):
            return rule.label
    return None


def classify_buyer_seller(text: str | None) -> str | None:
    return first_match(BUYER_SELLER_RULES, text)


def extract_timeline(text: str | None) -> str | None:
    return first_match(TIMELINE_RULES, text)


def explicit_urgency(text: str | None) -> str | None:
    return first_match(URGENCY_RULES, text)


def has_strong_intent(text: str | None) -> bool:
    return bool(text) and STRONG_INTENT_PATTERN.search(text) is not None
