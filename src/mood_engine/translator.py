"""
Text-to-Task Translator

Turns free text (typed, or a finished speech transcript) into a draft task:
title, description, priority, emotion, reminder time and tags.

Malformed input never raises: the draft falls back to the original text as
title, Medium priority, an inferred emotion and no reminder.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from .models import EMOTION_PRECEDENCE, Emotion, Priority, Task
from .patterns import DetectedSpan, SpanKind, extract, extract_tags, spans_of
from .scorer import complexity, infer_emotion


logger = logging.getLogger("MoodTasks.Translator")

FILLER_PHRASES = [
    "I need to ",
    "I want to ",
    "I should ",
    "I have to ",
    "Remind me to ",
    "Don't forget to ",
]

# Terminator runs followed by whitespace/end, so "2.5" and "3:30" survive
_SENTENCE_END = re.compile(r'[.!?]+(?=\s|$)')
_PRIORITY_LABEL = re.compile(
    r'\s*(?:urgent|asap|important|critical|low[\s-]+priority)\s*[:\-!]+\s*',
    re.IGNORECASE
)
_HASHTAG_TOKEN = re.compile(r'(?<!\w)#[\w/\-]+')
_LEADING_NOISE = re.compile(r'^[\s,;:\-]+')
_TRAILING_NOISE = re.compile(r'[\s,;:\-]+$')
# Connector left dangling in front of a removed date/time ("report by friday")
_DANGLING_CONNECTOR = re.compile(r'(?:^|\s+)(?:at|on|by|for|until|due)\s*$', re.IGNORECASE)

DEFAULT_REMINDER_TIME = (9, 0)
TONIGHT_TIME = (20, 0)

_WEEKDAY_INDEX = {
    'monday': 0, 'tuesday': 1, 'wednesday': 2, 'thursday': 3,
    'friday': 4, 'saturday': 5, 'sunday': 6,
}


@dataclass
class TaskDraft:
    """Structured result of translating one piece of text"""
    title: str
    description: Optional[str]
    priority: Priority
    emotion: Emotion
    reminder_at: Optional[datetime]
    tags: List[str] = field(default_factory=list)
    complexity: float = 0.0
    emotion_inferred: bool = False
    spans: List[DetectedSpan] = field(default_factory=list)
    source_text: str = ''

    def to_task(self, created_at: Optional[datetime] = None) -> Task:
        """Commit the draft as a new Task (raises ValueError on a blank title)"""
        return Task(
            title=self.title,
            description=self.description,
            priority=self.priority,
            emotion=self.emotion,
            reminder_at=self.reminder_at,
            created_at=created_at or datetime.now(),
            tags=list(self.tags),
            natural_language_input=self.source_text,
        )


def translate(text: str, now: Optional[datetime] = None) -> TaskDraft:
    """
    Parse free text into a draft task

    Args:
        text: Raw task text
        now: Reference time for relative reminders (defaults to the clock)

    Returns:
        TaskDraft; title is never empty unless the input itself is blank

    Example:
        translate("Urgent: finish report in 2 hours")
        → title "Finish report", High priority, STRESSFUL, reminder now+2h
    """
    now = now or datetime.now()
    source = text or ''
    spans = extract(source)

    if not source.strip():
        logger.debug("Blank input, returning default draft")
        return TaskDraft(
            title=source,
            description=None,
            priority=Priority.MEDIUM,
            emotion=infer_emotion(source, None, Priority.MEDIUM, complexity_score=0.0),
            reminder_at=None,
            emotion_inferred=True,
            spans=spans,
            source_text=source,
        )

    title_start, title_end, description = _split_title(source)
    title = _clean_title(source, title_start, title_end, spans)
    priority = _resolve_priority(spans)
    score = complexity(title, description)

    emotion = _explicit_emotion(spans)
    inferred = emotion is None
    if inferred:
        emotion = infer_emotion(title, description, priority, complexity_score=score)

    reminder_at = resolve_reminder(spans, now)

    draft = TaskDraft(
        title=title,
        description=description,
        priority=priority,
        emotion=emotion,
        reminder_at=reminder_at,
        tags=extract_tags(source),
        complexity=score,
        emotion_inferred=inferred,
        spans=spans,
        source_text=source,
    )

    logger.debug(
        f"Translated '{source[:40]}' → title='{title}', priority={priority.value}, "
        f"emotion={emotion.value}{' (inferred)' if inferred else ''}, reminder={reminder_at}"
    )
    return draft


# ==================== Title ====================

def _split_title(source: str) -> Tuple[int, int, Optional[str]]:
    """
    Locate the first non-empty sentence

    Returns:
        (title start, title end, description or None)
    """
    start = 0
    for match in _SENTENCE_END.finditer(source):
        if source[start:match.start()].strip():
            description = source[match.end():].strip()
            return start, match.start(), description or None
        start = match.end()
    return start, len(source), None


def _clean_title(source: str, start: int, end: int, spans: List[DetectedSpan]) -> str:
    cuts = [
        (s.start, s.end) for s in spans
        if s.kind in (SpanKind.TIME, SpanKind.DATE) and start <= s.start and s.end <= end
    ]

    label = _PRIORITY_LABEL.match(source, start, end)
    if label:
        cuts.append((label.start(), label.end()))

    for match in _HASHTAG_TOKEN.finditer(source, start, end):
        cuts.append((match.start(), match.end()))

    pieces = []
    cursor = start
    for cut_start, cut_end in _merge(cuts):
        pieces.append(_DANGLING_CONNECTOR.sub('', source[cursor:cut_start]))
        cursor = max(cursor, cut_end)
    pieces.append(source[cursor:end])

    title = re.sub(r'\s+', ' ', ' '.join(pieces))
    title = _LEADING_NOISE.sub('', title)
    title = _TRAILING_NOISE.sub('', title)
    title = strip_filler(title).strip()

    if not title:
        logger.debug("Title empty after cleanup, falling back to original text")
        return source.strip()

    return title[0].upper() + title[1:]


def _merge(intervals: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    merged = []
    for begin, finish in sorted(intervals):
        if merged and begin <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], finish))
        else:
            merged.append((begin, finish))
    return merged


def strip_filler(title: str) -> str:
    """
    Remove leading filler phrases ("I need to ", "Remind me to ", ...)

    Each phrase is tried once, longest first, case-insensitively.
    """
    for phrase in sorted(FILLER_PHRASES, key=len, reverse=True):
        normalized = title.replace('’', "'").lower()
        if normalized.startswith(phrase.lower()):
            title = title[len(phrase):]
    return title


# ==================== Priority & emotion ====================

def _resolve_priority(spans: List[DetectedSpan]) -> Priority:
    found = {s.value for s in spans_of(spans, SpanKind.PRIORITY)}
    if Priority.HIGH in found:
        return Priority.HIGH
    if Priority.LOW in found:
        return Priority.LOW
    return Priority.MEDIUM


def _explicit_emotion(spans: List[DetectedSpan]) -> Optional[Emotion]:
    found = {s.value for s in spans_of(spans, SpanKind.EMOTION)}
    for emotion in EMOTION_PRECEDENCE:
        if emotion in found:
            return emotion
    return None


# ==================== Reminder ====================

def roll_forward(candidate: datetime, now: datetime, step: timedelta) -> datetime:
    """
    Advance a clock-anchored reminder until it lies after now

    This is the only past-time correction: "today at 9am" said at 10am means
    tomorrow at 9am, "friday" said late on a Friday means next Friday.
    """
    while candidate <= now:
        candidate += step
    return candidate


def _at(day: date, clock: Tuple[int, int]) -> datetime:
    return datetime(day.year, day.month, day.day, clock[0], clock[1])


def resolve_reminder(spans: List[DetectedSpan], now: datetime) -> Optional[datetime]:
    """
    Pick a reminder time from detected spans, first rule wins:

    1. "in N minutes"             → now + N minutes
    2. "in N hours"               → now + N hours
    3. "tomorrow"                 → now + 1 day (at the detected clock time, if any)
    4. "today"/"tonight" + time   → today at that time
    5. weekday / next <weekday>   → that day (clock time or 09:00)
    6. month-day                  → that date this year (clock time or 09:00)
    7. this/next week or weekend  → today / +7 days / Saturday (clock time or 09:00)
    8. clock time with no usable date ("at 5pm", "at 5pm next month")
                                  → today at that time

    Clock-anchored results in the past are rolled forward (see roll_forward).
    A result outside the datetime range means no reminder.
    """
    try:
        return _resolve_reminder(spans, now)
    except OverflowError:
        logger.debug(f"Reminder out of range for now={now}, dropping it")
        return None


def _resolve_reminder(spans: List[DetectedSpan], now: datetime) -> Optional[datetime]:
    time_spans = spans_of(spans, SpanKind.TIME)
    date_spans = spans_of(spans, SpanKind.DATE)

    for rule in ('in_minutes', 'in_hours'):
        for span in time_spans:
            if span.rule == rule:
                return now + span.value

    # Highest-precedence clock rule wins when several matched
    clock = next((s.value for s in time_spans if isinstance(s.value, tuple)), None)
    tokens = [s.value for s in date_spans]

    if 'tomorrow' in tokens:
        candidate = now + timedelta(days=1)
        if clock:
            candidate = _at(candidate.date(), clock)
        return roll_forward(candidate, now, timedelta(days=1))

    if 'tonight' in tokens:
        return roll_forward(_at(now.date(), clock or TONIGHT_TIME), now, timedelta(days=1))

    if 'today' in tokens and clock:
        return roll_forward(_at(now.date(), clock), now, timedelta(days=1))

    weekday = _weekday_target(date_spans)
    if weekday is not None:
        name, strictly_after = weekday
        days_ahead = (_WEEKDAY_INDEX[name] - now.weekday()) % 7
        if strictly_after and days_ahead == 0:
            days_ahead = 7
        candidate = _at(now.date() + timedelta(days=days_ahead), clock or DEFAULT_REMINDER_TIME)
        return roll_forward(candidate, now, timedelta(days=7))

    for span in date_spans:
        if span.rule == 'month_day':
            return _month_day_reminder(span.value, clock or DEFAULT_REMINDER_TIME, now)

    week_day = _relative_week_day(date_spans, now)
    if week_day is not None:
        return roll_forward(_at(week_day, clock or DEFAULT_REMINDER_TIME), now, timedelta(days=7))

    if clock:
        return roll_forward(_at(now.date(), clock), now, timedelta(days=1))

    return None


def _relative_week_day(date_spans: List[DetectedSpan], now: datetime) -> Optional[date]:
    """Day meant by "this/next week" or "this/next weekend" (month/year have none)"""
    for span in date_spans:
        if span.rule != 'next_this':
            continue

        qualifier, unit = span.value
        if unit == 'week':
            return now.date() + timedelta(days=7 if qualifier == 'next' else 0)
        if unit == 'weekend':
            saturday = now.date() + timedelta(days=(5 - now.weekday()) % 7)
            return saturday + timedelta(days=7 if qualifier == 'next' else 0)
    return None


def _weekday_target(date_spans: List[DetectedSpan]) -> Optional[Tuple[str, bool]]:
    """(weekday name, must be after today) from next/this or bare weekday spans"""
    for span in date_spans:
        if span.rule == 'next_this' and span.value[1] in _WEEKDAY_INDEX:
            qualifier, name = span.value
            return name, qualifier == 'next'
    for span in date_spans:
        if span.rule == 'weekday':
            return span.value, False
    return None


def _month_day_reminder(month_day: Tuple[int, int], clock: Tuple[int, int], now: datetime) -> Optional[datetime]:
    month, day = month_day
    for year in (now.year, now.year + 1, now.year + 2, now.year + 3, now.year + 4):
        try:
            candidate = datetime(year, month, day, clock[0], clock[1])
        except ValueError:
            # Feb 29 outside a leap year
            continue
        if candidate > now:
            return candidate
    return None
