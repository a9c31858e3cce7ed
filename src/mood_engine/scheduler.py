"""
Task Scheduler

Selects and orders the working set for the current mood:
1. Drop completed tasks (unless asked to keep them)
2. Dynamic priority = base priority + mood affinity + escalation
3. Sort by dynamic priority, then due time, then creation time
4. Truncate to the mood's optimal task count
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from .models import Mood, Task
from .mood import MoodPolicy
from .scorer import estimate_duration


logger = logging.getLogger("MoodTasks.Scheduler")

AFFINITY_BONUS = 1
ESCALATION_BONUS = 1

DEFAULT_ESCALATION_WINDOW = timedelta(days=3)
DEFAULT_DUE_SOON_WINDOW = timedelta(0)


@dataclass(frozen=True)
class ScheduleEntry:
    """A task with the scores that placed it"""
    task: Task
    dynamic_priority: int
    affine: bool
    escalated: bool
    deadline_pressure: bool = False


class TaskScheduler:
    """Mood-aware ordering of a task collection"""

    def __init__(
        self,
        policy: Optional[MoodPolicy] = None,
        escalation_window: timedelta = DEFAULT_ESCALATION_WINDOW,
        due_soon_window: timedelta = DEFAULT_DUE_SOON_WINDOW,
        duration_aware: bool = True
    ):
        """
        Args:
            policy: Mood policy table (default table if None)
            escalation_window: Age after which an open task escalates
            due_soon_window: How far ahead of its due time a task escalates
                             (zero means only once the due time has passed)
            duration_aware: Also escalate once the time left before the due
                            time is shorter than the task's estimated duration
        """
        self.policy = policy or MoodPolicy()
        self.escalation_window = escalation_window
        self.due_soon_window = due_soon_window
        self.duration_aware = duration_aware

    def lead_time(self, task: Task) -> timedelta:
        """How long before its due time a task comes under deadline pressure"""
        if not self.duration_aware:
            return self.due_soon_window
        return self.due_soon_window + estimate_duration(task.title, task.description, task.priority)

    def has_deadline_pressure(self, task: Task, now: datetime) -> bool:
        if task.completed or task.due_at is None:
            return False
        return task.due_at <= now + self.lead_time(task)

    def is_escalated(self, task: Task, now: datetime) -> bool:
        """
        Check whether an open task has waited too long

        Escalated when the reminder/deadline is close (see lead_time) or when
        the task is older than escalation_window. Both tests can only flip
        from False to True as now moves forward.
        """
        if task.completed:
            return False

        if self.has_deadline_pressure(task, now):
            return True

        return now - task.created_at >= self.escalation_window

    def dynamic_priority(self, task: Task, mood: Mood, now: datetime) -> int:
        return self._entry(task, mood, now).dynamic_priority

    def _entry(self, task: Task, mood: Mood, now: datetime) -> ScheduleEntry:
        affine = self.policy.is_affine(mood, task.emotion)
        pressure = self.has_deadline_pressure(task, now)
        escalated = self.is_escalated(task, now)

        score = task.priority.score
        if affine:
            score += AFFINITY_BONUS
        if escalated:
            score += ESCALATION_BONUS

        return ScheduleEntry(
            task=task,
            dynamic_priority=score,
            affine=affine,
            escalated=escalated,
            deadline_pressure=pressure,
        )

    def rank(
        self,
        tasks: Sequence[Task],
        mood: Mood,
        now: datetime,
        include_completed: bool = False,
        bounded: bool = True
    ) -> List[ScheduleEntry]:
        """
        Score, order and (optionally) truncate tasks for a mood

        Args:
            tasks: Full, id-unique task collection
            mood: Current mood
            now: Reference time (injected, never read from the clock)
            include_completed: Keep completed tasks as candidates
            bounded: Truncate to the mood's optimal task count

        Returns:
            Schedule entries, best first
        """
        # Policy lookup first so a gap fails even for an empty collection
        limit = self.policy.optimal_task_count(mood, now)

        candidates = [t for t in tasks if include_completed or not t.completed]
        entries = [self._entry(t, mood, now) for t in candidates]

        # sorted() is stable, so input order settles any remaining ties
        entries = sorted(entries, key=_sort_key)

        escalated_count = sum(1 for e in entries if e.escalated)
        logger.debug(
            f"Ranked {len(entries)} of {len(tasks)} tasks for mood={mood.value} "
            f"({escalated_count} escalated)"
        )

        if bounded:
            entries = entries[:limit]

        return entries

    def schedule(
        self,
        tasks: Sequence[Task],
        mood: Mood,
        now: datetime,
        include_completed: bool = False,
        bounded: bool = True
    ) -> List[Task]:
        """Ordered (and by default truncated) working set of tasks"""
        return [e.task for e in self.rank(tasks, mood, now, include_completed, bounded)]


def _sort_key(entry: ScheduleEntry):
    due = entry.task.due_at
    return (
        -entry.dynamic_priority,
        due is None,
        due or datetime.max,
        entry.task.created_at,
    )


_DEFAULT_SCHEDULER = TaskScheduler()


def schedule(
    tasks: Sequence[Task],
    mood: Mood,
    now: datetime,
    include_completed: bool = False,
    bounded: bool = True
) -> List[Task]:
    """Schedule with the default policy and escalation windows"""
    return _DEFAULT_SCHEDULER.schedule(tasks, mood, now, include_completed, bounded)
