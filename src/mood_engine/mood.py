"""
Mood Context

Holds the user's current mood and the policy table that turns a mood into a
working-set size and a set of affine task emotions. The table covers every
Mood; a missing row is a programming defect and fails at import time.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from .models import Emotion, Mood


logger = logging.getLogger("MoodTasks.Mood")


class MoodPolicyError(RuntimeError):
    """Raised when a mood has no policy entry (never expected at runtime)"""


@dataclass(frozen=True)
class MoodPolicyEntry:
    working_set: int
    affine: FrozenSet[Emotion]


DEFAULT_POLICY: Dict[Mood, MoodPolicyEntry] = {
    Mood.ENERGIZED: MoodPolicyEntry(8, frozenset({Emotion.ENERGIZING, Emotion.FOCUSED, Emotion.CREATIVE})),
    Mood.POSITIVE: MoodPolicyEntry(7, frozenset({Emotion.CREATIVE, Emotion.FOCUSED, Emotion.ENERGIZING})),
    Mood.CREATIVE: MoodPolicyEntry(7, frozenset({Emotion.CREATIVE, Emotion.CALMING})),
    Mood.FOCUSED: MoodPolicyEntry(6, frozenset({Emotion.FOCUSED, Emotion.ROUTINE, Emotion.CREATIVE})),
    Mood.CALM: MoodPolicyEntry(5, frozenset({Emotion.CALMING, Emotion.ROUTINE})),
    Mood.ANXIOUS: MoodPolicyEntry(4, frozenset({Emotion.CALMING, Emotion.ROUTINE})),
    Mood.STRESSED: MoodPolicyEntry(3, frozenset({Emotion.CALMING, Emotion.ROUTINE})),
    Mood.TIRED: MoodPolicyEntry(2, frozenset({Emotion.CALMING})),
}

MIN_WORKING_SET = 2

# (hour the band ends at, multiplier); last band runs to midnight
TIME_OF_DAY_MULTIPLIERS = [
    (9, 0.8),    # early morning
    (12, 1.0),   # morning peak
    (14, 0.9),   # post-lunch dip
    (17, 1.0),   # afternoon focus
    (20, 0.8),   # evening wind-down
    (24, 0.6),   # night
]


class MoodPolicy:
    """Exhaustive mood → (working-set size, affine emotions) table"""

    def __init__(self, table: Optional[Dict[Mood, MoodPolicyEntry]] = None, adjust_for_time_of_day: bool = False):
        self.table = dict(table or DEFAULT_POLICY)
        self.adjust_for_time_of_day = adjust_for_time_of_day

        missing = [mood.value for mood in Mood if mood not in self.table]
        if missing:
            raise MoodPolicyError(f"Mood policy is missing entries for: {', '.join(missing)}")

    def entry(self, mood: Mood) -> MoodPolicyEntry:
        try:
            return self.table[mood]
        except KeyError:
            raise MoodPolicyError(f"No policy entry for mood {mood!r}") from None

    def affine_emotions(self, mood: Mood) -> FrozenSet[Emotion]:
        return self.entry(mood).affine

    def is_affine(self, mood: Mood, emotion: Emotion) -> bool:
        return emotion in self.entry(mood).affine

    def optimal_task_count(self, mood: Mood, at: Optional[datetime] = None) -> int:
        """
        Working-set size for a mood

        With time-of-day adjustment enabled and a time given, the base count
        is scaled down for early/late hours (never below MIN_WORKING_SET and
        never above the base count).
        """
        base = self.entry(mood).working_set
        if at is None or not self.adjust_for_time_of_day:
            return base

        multiplier = time_of_day_multiplier(at)
        return min(base, max(MIN_WORKING_SET, int(base * multiplier)))


def time_of_day_multiplier(at: datetime) -> float:
    for band_end, multiplier in TIME_OF_DAY_MULTIPLIERS:
        if at.hour < band_end:
            return multiplier
    return TIME_OF_DAY_MULTIPLIERS[-1][1]


_DEFAULT = MoodPolicy()


def optimal_task_count(mood: Mood, at: Optional[datetime] = None) -> int:
    """Working-set size from the default policy table"""
    return _DEFAULT.optimal_task_count(mood, at)


def affine_emotions(mood: Mood) -> FrozenSet[Emotion]:
    return _DEFAULT.affine_emotions(mood)


class MoodContext:
    """
    The single current mood, passed explicitly to whoever schedules

    Writes and reads are serialised so a schedule() started after set()
    always sees the new mood.
    """

    def __init__(self, mood: Mood = Mood.CALM, policy: Optional[MoodPolicy] = None):
        self._lock = threading.RLock()
        self._mood = mood
        self.policy = policy or _DEFAULT

    def current(self) -> Mood:
        with self._lock:
            return self._mood

    def set(self, mood: Mood) -> None:
        if not isinstance(mood, Mood):
            raise TypeError(f"Expected Mood, got {type(mood).__name__}")

        with self._lock:
            previous = self._mood
            self._mood = mood

        if previous != mood:
            logger.info(f"Mood changed: {previous.value} → {mood.value}")

    def optimal_task_count(self, mood: Optional[Mood] = None, at: Optional[datetime] = None) -> int:
        return self.policy.optimal_task_count(mood or self.current(), at)
