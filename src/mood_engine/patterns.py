"""
Pattern Extractor

Stateless regex/keyword matchers that find time, date, priority and emotion
cues in raw task text. Every match is reported with its absolute offset into
the ORIGINAL text so callers can highlight it or cut it out of a title.

Evaluation order is part of the contract:
- categories: TIME, DATE, PRIORITY, EMOTION
- rules within a category: the order of the tables below
- matches within a rule: text order

Spans may overlap (within and across categories). Resolving overlaps is the
translator's job.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, List, Optional, Pattern

from .models import Emotion, Priority


logger = logging.getLogger("MoodTasks.Patterns")


class SpanKind(Enum):
    TIME = 'time'
    DATE = 'date'
    PRIORITY = 'priority'
    EMOTION = 'emotion'


@dataclass(frozen=True)
class DetectedSpan:
    """A matched fragment of the source text"""
    start: int
    length: int
    kind: SpanKind
    text: str
    rule: str
    value: Any = None

    @property
    def end(self) -> int:
        return self.start + self.length

    def overlaps(self, other: 'DetectedSpan') -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class PatternRule:
    """One row of the rule table: regex plus a parser for its value"""
    name: str
    kind: SpanKind
    pattern: Pattern
    parse: Callable[[re.Match], Any]


def _compile(regex: str) -> Pattern:
    return re.compile(regex, re.IGNORECASE)


# ==================== Value parsers ====================
# A parser returning None rejects the match (e.g. "25:00" or "13pm").

def _twelve_hour(hour: int, minute: int, meridiem: str) -> Optional[tuple]:
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        return None
    meridiem = meridiem.lower()
    if meridiem == 'pm' and hour != 12:
        hour += 12
    elif meridiem == 'am' and hour == 12:
        hour = 0
    return (hour, minute)


def _twenty_four_hour(hour: int, minute: int) -> Optional[tuple]:
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        return None
    return (hour, minute)


def _parse_clock_ampm(m: re.Match) -> Optional[tuple]:
    return _twelve_hour(int(m.group(1)), int(m.group(2)), m.group(3))


def _parse_hour_ampm(m: re.Match) -> Optional[tuple]:
    return _twelve_hour(int(m.group(1)), 0, m.group(2))


def _parse_clock(m: re.Match) -> Optional[tuple]:
    return _twenty_four_hour(int(m.group(1)), int(m.group(2)))


def _parse_duration(m: re.Match, unit: str) -> Optional[timedelta]:
    try:
        return timedelta(**{unit: int(m.group(1))})
    except (OverflowError, ValueError):
        return None


def _parse_minutes(m: re.Match) -> Optional[timedelta]:
    return _parse_duration(m, 'minutes')


def _parse_hours(m: re.Match) -> Optional[timedelta]:
    return _parse_duration(m, 'hours')


def _parse_token(m: re.Match) -> str:
    return m.group(1).lower()


_MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}


def _parse_month_day(m: re.Match) -> Optional[tuple]:
    month = _MONTHS[m.group(1)[:3].lower()]
    day = int(m.group(2))
    try:
        # Leap year, so "Feb 29" is accepted here
        date(2000, month, day)
    except ValueError:
        return None
    return (month, day)


def _parse_relative_unit(m: re.Match) -> tuple:
    return (m.group(1).lower(), m.group(2).lower())


def _constant(value: Any) -> Callable[[re.Match], Any]:
    return lambda m: value


# ==================== Rule tables ====================

_WEEKDAYS = r'monday|tuesday|wednesday|thursday|friday|saturday|sunday'
_MONTH_NAMES = (
    r'jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?'
    r'|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?'
)

TIME_RULES = [
    PatternRule('clock_ampm', SpanKind.TIME,
                _compile(r'(?:\bat\s+)?(?<![\d:])(\d{1,2}):(\d{2})\s*(am|pm)\b'),
                _parse_clock_ampm),
    PatternRule('hour_ampm', SpanKind.TIME,
                _compile(r'(?:\bat\s+)?(?<![\d:])(\d{1,2})\s*(am|pm)\b'),
                _parse_hour_ampm),
    PatternRule('at_clock', SpanKind.TIME,
                _compile(r'\bat\s+(\d{1,2}):(\d{2})(?![\d:])(?!\s*(?:am|pm)\b)'),
                _parse_clock),
    PatternRule('bare_clock', SpanKind.TIME,
                _compile(r'(?<![\d:])(\d{1,2}):(\d{2})(?![\d:])'),
                _parse_clock),
    PatternRule('in_minutes', SpanKind.TIME,
                _compile(r'\bin\s+(\d{1,6})\s*(?:minutes?|mins?)\b'),
                _parse_minutes),
    PatternRule('in_hours', SpanKind.TIME,
                _compile(r'\bin\s+(\d{1,6})\s*(?:hours?|hrs?)\b'),
                _parse_hours),
]

DATE_RULES = [
    PatternRule('relative', SpanKind.DATE,
                _compile(r'\b(today|tonight|tomorrow|yesterday)\b'),
                _parse_token),
    PatternRule('weekday', SpanKind.DATE,
                _compile(rf'\b(?:on\s+)?({_WEEKDAYS})\b'),
                _parse_token),
    PatternRule('month_day', SpanKind.DATE,
                _compile(rf'\b(?:on\s+)?({_MONTH_NAMES})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b'),
                _parse_month_day),
    PatternRule('next_this', SpanKind.DATE,
                _compile(rf'\b(next|this)\s+(week|weekend|month|year|{_WEEKDAYS})\b'),
                _parse_relative_unit),
]

PRIORITY_RULES = [
    PatternRule('high', SpanKind.PRIORITY,
                _compile(r'\b(?:urgent(?:ly)?|asap|important|critical)\b'),
                _constant(Priority.HIGH)),
    PatternRule('low', SpanKind.PRIORITY,
                _compile(r'\b(?:low(?:[\s-]+priority)?|later|sometime|someday|eventually)\b'),
                _constant(Priority.LOW)),
]

# Same order as EMOTION_PRECEDENCE
EMOTION_RULES = [
    PatternRule('stress', SpanKind.EMOTION,
                _compile(r'\b(?:stress(?:ed|ful)?|pressure|overwhelm(?:ed|ing)?'
                         r'|urgent(?:ly)?|asap|deadline|emergency)\b'),
                _constant(Emotion.STRESSFUL)),
    PatternRule('anxiety', SpanKind.EMOTION,
                _compile(r'\b(?:anxious|nervous|worried|worry|uneasy|scared)\b'),
                _constant(Emotion.ANXIOUS)),
    PatternRule('creative', SpanKind.EMOTION,
                _compile(r'\b(?:creative|brainstorm(?:ing)?|ideas?|design|inspired|imaginative)\b'),
                _constant(Emotion.CREATIVE)),
    PatternRule('energy', SpanKind.EMOTION,
                _compile(r'\b(?:excited|energi[sz]ed|energetic|pumped|motivated)\b'),
                _constant(Emotion.ENERGIZING)),
    PatternRule('focus', SpanKind.EMOTION,
                _compile(r'\b(?:focus(?:ed)?|concentrate|work|study)\b'),
                _constant(Emotion.FOCUSED)),
    PatternRule('calm', SpanKind.EMOTION,
                _compile(r'\b(?:calm|relax(?:ed|ing)?|peaceful|meditat(?:e|ion|ing))\b'),
                _constant(Emotion.CALMING)),
]

RULES = TIME_RULES + DATE_RULES + PRIORITY_RULES + EMOTION_RULES


def extract(text: str) -> List[DetectedSpan]:
    """
    Find every time, date, priority and emotion cue in text

    Args:
        text: Raw task text (never modified)

    Returns:
        Spans in evaluation order (category, then rule, then position)
    """
    if not text:
        return []

    spans = []
    for rule in RULES:
        for match in rule.pattern.finditer(text):
            value = rule.parse(match)
            if value is None:
                logger.debug(f"Rejected {rule.name} fragment '{match.group(0)}'")
                continue
            spans.append(DetectedSpan(
                start=match.start(),
                length=match.end() - match.start(),
                kind=rule.kind,
                text=match.group(0),
                rule=rule.name,
                value=value,
            ))

    logger.debug(f"Extracted {len(spans)} spans from '{text[:40]}'")
    return spans


def spans_of(spans: List[DetectedSpan], kind: SpanKind) -> List[DetectedSpan]:
    return [s for s in spans if s.kind == kind]


# ==================== Tags ====================

_HASHTAG = re.compile(r'(?<!\w)#(\w+)')
_MENTION = re.compile(r'(?<!\w)@(\w+)')

CONTEXTUAL_TAGS = [
    ('work', ['work', 'office', 'meeting', 'presentation', 'project', 'deadline', 'client', 'colleague']),
    ('personal', ['personal', 'family', 'friend', 'home', 'private']),
    ('health', ['health', 'doctor', 'medicine', 'exercise', 'workout', 'gym', 'fitness', 'diet']),
    ('shopping', ['buy', 'shop', 'grocery', 'groceries', 'store', 'purchase', 'order']),
    ('learning', ['learn', 'study', 'course', 'education', 'training', 'practice']),
    ('creative', ['creative', 'design', 'art', 'music', 'write', 'brainstorm', 'idea']),
    ('urgent', ['urgent', 'asap', 'emergency', 'immediately']),
    ('routine', ['daily', 'weekly', 'routine', 'habit', 'regular']),
    ('travel', ['travel', 'trip', 'vacation', 'flight', 'hotel']),
    ('finance', ['money', 'bank', 'pay', 'bill', 'budget', 'finance', 'invest']),
]

_CONTEXTUAL_PATTERNS = [
    (tag, _compile(r'\b(?:' + '|'.join(keywords) + r')(?:s|es|ing)?\b'))
    for tag, keywords in CONTEXTUAL_TAGS
]


def extract_tags(text: str) -> List[str]:
    """
    Collect tags from text: #hashtags, @mentions, then contextual keywords

    Returns:
        Unique tags in discovery order
    """
    if not text:
        return []

    tags = []

    def add(tag):
        if tag not in tags:
            tags.append(tag)

    for match in _HASHTAG.finditer(text):
        add(match.group(1).lower())

    for match in _MENTION.finditer(text):
        add(f"@{match.group(1)}")

    for tag, pattern in _CONTEXTUAL_PATTERNS:
        if pattern.search(text):
            add(tag)

    return tags
