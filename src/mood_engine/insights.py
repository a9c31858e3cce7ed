"""
Mood & Productivity Insights

Reads the mood history and the task collection and reports patterns:
- Mood pattern: one mood dominating the last 7 entries
- Completion rate: very high or very low share of finished tasks
- Completion mood: the mood most tasks get finished in
- Emotion mix: the most common kind of task
- Wellness: repeated stress, or too many open High-priority tasks

Pure functions over plain data; nothing here touches the store.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .models import Mood, MoodEntry, Priority, Task


logger = logging.getLogger("MoodTasks.Insights")

MOOD_WINDOW = 7
MIN_MOOD_ENTRIES = 3
DOMINANT_MOOD_SHARE = 0.6

HIGH_COMPLETION_RATE = 0.8
LOW_COMPLETION_RATE = 0.3
MIN_COMPLETED_FOR_MOOD = 3

STRESS_WINDOW = 3
STRESS_ALERT_COUNT = 2
OVERLOAD_COUNT = 3

MOOD_RECOMMENDATIONS = {
    Mood.POSITIVE: "Great energy! Perfect time to tackle challenging tasks.",
    Mood.CALM: "Peaceful state. Ideal for focused, detailed work.",
    Mood.FOCUSED: "Sharp focus detected. Use this energy for complex projects.",
    Mood.STRESSED: "Feeling overwhelmed? Try breaking tasks into smaller steps.",
    Mood.CREATIVE: "Creative flow! Great time for brainstorming and ideation.",
    Mood.ENERGIZED: "Plenty of drive. Line up the tasks you've been putting off.",
    Mood.TIRED: "Running low. Stick to a couple of light tasks and rest.",
    Mood.ANXIOUS: "Feeling uneasy? Start with something small and calming.",
}


class InsightKind(Enum):
    MOOD = 'mood'
    PRODUCTIVITY = 'productivity'
    WELLNESS = 'wellness'


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    title: str
    description: str
    recommendation: str


def _chronological(entries: Sequence[MoodEntry]) -> List[MoodEntry]:
    return sorted(entries, key=lambda e: e.timestamp)


def _percent(share: float) -> int:
    return int(share * 100)


def mood_pattern(entries: Sequence[MoodEntry]) -> Optional[Insight]:
    """
    Report a mood that fills at least 60% of the last 7 entries

    Needs at least 3 entries. On a tie the mood seen first in the window wins.
    """
    if len(entries) < MIN_MOOD_ENTRIES:
        return None

    recent = _chronological(entries)[-MOOD_WINDOW:]
    mood, count = Counter(e.mood for e in recent).most_common(1)[0]
    share = count / len(recent)

    if share < DOMINANT_MOOD_SHARE:
        return None

    return Insight(
        kind=InsightKind.MOOD,
        title="Mood Pattern Detected",
        description=f"You've been feeling {mood.value} {_percent(share)}% of the time lately.",
        recommendation=MOOD_RECOMMENDATIONS[mood],
    )


def completion_rate(tasks: Sequence[Task]) -> Optional[Insight]:
    """Praise a completion rate of 80%+, nudge one of 30% or less"""
    if not tasks:
        return None

    share = sum(1 for t in tasks if t.completed) / len(tasks)

    if share >= HIGH_COMPLETION_RATE:
        return Insight(
            kind=InsightKind.PRODUCTIVITY,
            title="Excellent Progress!",
            description=f"You've completed {_percent(share)}% of your tasks. Keep up the great work!",
            recommendation="Consider setting more challenging goals for tomorrow.",
        )

    if share <= LOW_COMPLETION_RATE:
        return Insight(
            kind=InsightKind.PRODUCTIVITY,
            title="Need a Boost?",
            description=f"You've completed {_percent(share)}% of your tasks. Let's get back on track!",
            recommendation="Try breaking down larger tasks into smaller, manageable steps.",
        )

    return None


def completion_mood(tasks: Sequence[Task]) -> Optional[Insight]:
    """Mood most tasks were finished in (needs 3+ completions with a mood)"""
    moods = [t.completed_mood for t in tasks if t.completed and t.completed_mood]
    if len(moods) < MIN_COMPLETED_FOR_MOOD:
        return None

    mood, count = Counter(moods).most_common(1)[0]
    return Insight(
        kind=InsightKind.PRODUCTIVITY,
        title="Your Productive Mood",
        description=f"{_percent(count / len(moods))}% of your finished tasks were done while {mood.value}.",
        recommendation=f"Save your hardest tasks for when you feel {mood.value}.",
    )


def emotion_mix(tasks: Sequence[Task]) -> Optional[Insight]:
    if not tasks:
        return None

    emotion, _ = Counter(t.emotion for t in tasks).most_common(1)[0]
    return Insight(
        kind=InsightKind.PRODUCTIVITY,
        title="Task Energy Pattern",
        description=f"Most of your tasks are {emotion.value}.",
        recommendation="Consider balancing your task types for better energy management.",
    )


def wellness(entries: Sequence[MoodEntry], tasks: Sequence[Task]) -> Optional[Insight]:
    """
    Stress alert (2 of the last 3 moods stressed) takes precedence over the
    High-priority overload warning (3+ open High tasks)
    """
    recent = _chronological(entries)[-STRESS_WINDOW:]
    if sum(1 for e in recent if e.mood == Mood.STRESSED) >= STRESS_ALERT_COUNT:
        return Insight(
            kind=InsightKind.WELLNESS,
            title="Stress Alert",
            description="You've been feeling stressed recently. Time for some self-care!",
            recommendation="Try a 5-minute meditation or take a short walk to clear your mind.",
        )

    pending_high = [t for t in tasks if not t.completed and t.priority == Priority.HIGH]
    if len(pending_high) >= OVERLOAD_COUNT:
        return Insight(
            kind=InsightKind.WELLNESS,
            title="High Priority Overload",
            description=f"You have {len(pending_high)} high-priority tasks pending.",
            recommendation="Consider delegating or rescheduling some tasks to reduce stress.",
        )

    return None


def generate_insights(entries: Sequence[MoodEntry], tasks: Sequence[Task]) -> List[Insight]:
    """
    Run every analysis and collect what it found

    Args:
        entries: Mood history (any order)
        tasks: Full task collection

    Returns:
        Insights in a fixed order: mood, completion rate, completion mood,
        emotion mix, wellness
    """
    found = [
        mood_pattern(entries),
        completion_rate(tasks),
        completion_mood(tasks),
        emotion_mix(tasks),
        wellness(entries, tasks),
    ]
    insights = [i for i in found if i is not None]

    logger.debug(f"Generated {len(insights)} insights from {len(entries)} moods and {len(tasks)} tasks")
    return insights
