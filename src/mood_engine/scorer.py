"""
Complexity & Emotion Scorer

Heuristic scoring used when a task arrives without an explicit emotion cue:
- complexity(): additive keyword/length score clamped to [0, 1]
- infer_emotion(): keyword rules in EMOTION_PRECEDENCE order, falling back
  to complexity bands when nothing fires
- estimate_duration(): rough effort from keywords, else from priority
"""

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import List, Optional

from .models import EMOTION_PRECEDENCE, Emotion, Priority


logger = logging.getLogger("MoodTasks.Scorer")


# ==================== Complexity weights ====================

HIGH_WEIGHT_KEYWORDS = ['develop', 'design', 'research', 'implement', 'analyze', 'analyse', 'architect', 'migrate']
MEDIUM_WEIGHT_KEYWORDS = ['organize', 'organise', 'prepare', 'coordinate', 'plan', 'review', 'schedule']
LOW_WEIGHT_KEYWORDS = ['multiple', 'detailed', 'comprehensive', 'thorough', 'extensive', 'several', 'various']
SIMPLE_KEYWORDS = ['call', 'email', 'buy', 'quick', 'easy', 'text', 'reply', 'pay', 'check']

KEYWORD_WEIGHTS = [
    (HIGH_WEIGHT_KEYWORDS, 0.3),
    (MEDIUM_WEIGHT_KEYWORDS, 0.2),
    (LOW_WEIGHT_KEYWORDS, 0.1),
    (SIMPLE_KEYWORDS, -0.2),
]

MULTI_STEP_CONNECTIVES = ['and', 'then', 'after', 'before', 'first', 'second', 'next', 'finally']
CONNECTIVE_WEIGHT = 0.1

LONG_TEXT_WORDS = 10   # more than this → +0.2
MEDIUM_TEXT_WORDS = 6  # 6..10 → +0.1

HOUR_DURATION_WEIGHT = 0.2
DAY_DURATION_WEIGHT = 0.3


# ==================== Emotion rules ====================

# Rows must follow EMOTION_PRECEDENCE; FOCUSED is the work cue and resolves
# to ROUTINE below FOCUS_COMPLEXITY_THRESHOLD.
EMOTION_KEYWORD_RULES = [
    (Emotion.STRESSFUL, ['urgent', 'deadline', 'emergency', 'asap']),
    (Emotion.ANXIOUS, ['anxious', 'anxiety', 'nervous', 'worried', 'worry', 'panic']),
    (Emotion.CREATIVE, ['creative', 'design', 'brainstorm', 'idea', 'sketch', 'compose', 'paint', 'draw']),
    (Emotion.ENERGIZING, ['exercise', 'workout', 'gym', 'energy', 'jog', 'hike', 'swim', 'dance']),
    (Emotion.FOCUSED, ['meeting', 'work', 'project', 'report', 'presentation', 'study']),
    (Emotion.CALMING, ['relax', 'meditate', 'meditation', 'social', 'family', 'friend',
                       'mom', 'dad', 'read', 'walk', 'bath', 'nap']),
    (Emotion.ROUTINE, ['organize', 'organise', 'clean', 'tidy', 'laundry', 'simple', 'chores', 'groceries']),
]

FOCUS_COMPLEXITY_THRESHOLD = 0.7


# ==================== Duration estimates ====================

# Hours of effort; first keyword found wins, so longer jobs come first
DURATION_KEYWORDS = [
    ('project', 8.0),
    ('presentation', 4.0),
    ('research', 3.0),
    ('brainstorm', 2.0),
    ('plan', 2.0),
    ('creative', 1.5),
    ('meeting', 1.0),
    ('review', 1.0),
    ('call', 0.5),
    ('email', 0.25),
]

DEFAULT_DURATION_HOURS = {
    Priority.HIGH: 2.0,
    Priority.MEDIUM: 1.0,
    Priority.LOW: 0.5,
}

if tuple(emotion for emotion, _ in EMOTION_KEYWORD_RULES) != EMOTION_PRECEDENCE:
    raise RuntimeError("EMOTION_KEYWORD_RULES is out of step with EMOTION_PRECEDENCE")


@dataclass(frozen=True)
class TaskScore:
    complexity: float
    emotion: Emotion


# Inflections a complexity keyword may carry ("plans", "planning",
# "development", "migration") but not unrelated words ("plants", "payroll")
_INFLECTIONS = r'(?:s|es|d|ed|ing|er|ers|ment|ments|ion|ions|ation|ations|ure)?'


@lru_cache(maxsize=None)
def _prefix_pattern(keyword: str):
    stems = [re.escape(keyword)]
    if keyword.endswith('e'):
        # "organize" → "organizing", "migrate" → "migration"
        stems.append(re.escape(keyword[:-1]))
    else:
        # "plan" → "planning"
        stems.append(re.escape(keyword + keyword[-1]))
    return re.compile(rf'\b(?:{"|".join(stems)}){_INFLECTIONS}\b')


@lru_cache(maxsize=None)
def _word_pattern(keyword: str):
    return re.compile(rf'\b{re.escape(keyword)}(?:s|es|ed|ing)?\b')


def _combined_text(title: str, description: Optional[str]) -> str:
    return f"{title or ''} {description or ''}".lower().strip()


def _matched(text: str, keywords: List[str], pattern_for) -> List[str]:
    return [kw for kw in keywords if pattern_for(kw).search(text)]


def complexity(title: str, description: Optional[str] = None) -> float:
    """
    Estimate how demanding a task is, 0.0 (trivial) to 1.0 (heavy)

    Args:
        title: Task title
        description: Optional notes

    Returns:
        Clamped additive score

    Example:
        "Buy milk" → 0.0
        "Analyze and implement a comprehensive database migration strategy" → 1.0
    """
    text = _combined_text(title, description)
    if not text:
        return 0.0

    score = 0.0

    for keywords, weight in KEYWORD_WEIGHTS:
        score += weight * len(_matched(text, keywords, _prefix_pattern))

    word_count = len(text.split())
    if word_count > LONG_TEXT_WORDS:
        score += 0.2
    elif word_count >= MEDIUM_TEXT_WORDS:
        score += 0.1

    words = set(re.findall(r"[a-z']+", text))
    connectives = [w for w in MULTI_STEP_CONNECTIVES if w in words]
    score += CONNECTIVE_WEIGHT * len(connectives)

    if re.search(r'\bhours?\b', text):
        score += HOUR_DURATION_WEIGHT
    if re.search(r'\b(?:days?|weeks?)\b', text):
        score += DAY_DURATION_WEIGHT

    clamped = max(0.0, min(1.0, score))
    logger.debug(f"Complexity for '{text[:30]}': {score:.2f} → {clamped:.2f}")
    return round(clamped, 4)


def infer_emotion(
    title: str,
    description: Optional[str] = None,
    priority: Priority = Priority.MEDIUM,
    complexity_score: Optional[float] = None
) -> Emotion:
    """
    Classify the emotion a task calls for

    First keyword rule to fire wins; otherwise the complexity band decides:
        >= 0.8      → FOCUSED
        0.6 .. 0.8  → FOCUSED if priority is HIGH, else ROUTINE
        0.3 .. 0.6  → ROUTINE
        < 0.3       → CALMING
    """
    text = _combined_text(title, description)
    if complexity_score is None:
        complexity_score = complexity(title, description)

    for emotion, keywords in EMOTION_KEYWORD_RULES:
        hits = _matched(text, keywords, _word_pattern)
        if not hits:
            continue

        if emotion == Emotion.FOCUSED and complexity_score < FOCUS_COMPLEXITY_THRESHOLD:
            emotion = Emotion.ROUTINE

        logger.debug(f"Emotion for '{text[:30]}': {emotion.value} (keyword '{hits[0]}')")
        return emotion

    if complexity_score >= 0.8:
        emotion = Emotion.FOCUSED
    elif complexity_score >= 0.6:
        emotion = Emotion.FOCUSED if priority == Priority.HIGH else Emotion.ROUTINE
    elif complexity_score >= 0.3:
        emotion = Emotion.ROUTINE
    else:
        emotion = Emotion.CALMING

    logger.debug(f"Emotion for '{text[:30]}': {emotion.value} (complexity {complexity_score:.2f})")
    return emotion


def score_task(title: str, description: Optional[str] = None, priority: Priority = Priority.MEDIUM) -> TaskScore:
    """Complexity and inferred emotion in one pass"""
    score = complexity(title, description)
    return TaskScore(
        complexity=score,
        emotion=infer_emotion(title, description, priority, complexity_score=score),
    )


def estimate_duration(
    title: str,
    description: Optional[str] = None,
    priority: Priority = Priority.MEDIUM
) -> timedelta:
    """
    Rough time a task needs, used to start deadline pressure early

    Example:
        "Prepare presentation slides" → 4 hours
        "Water plants" (High priority) → 2 hours
    """
    text = _combined_text(title, description)

    for keyword, hours in DURATION_KEYWORDS:
        if _prefix_pattern(keyword).search(text):
            return timedelta(hours=hours)

    return timedelta(hours=DEFAULT_DURATION_HOURS[priority])
