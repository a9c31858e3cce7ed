"""
Tests for mood-aware scheduling

Run with: pytest tests/
"""

import pytest
from datetime import timedelta

from mood_engine.models import Emotion, Mood, Priority
from mood_engine.mood import MoodPolicy, MoodPolicyError, optimal_task_count
from mood_engine.scheduler import TaskScheduler, schedule


class TestSchedule:

    def test_empty_collection(self, now):
        assert schedule([], Mood.CALM, now) == []

    def test_completed_tasks_excluded(self, now, make_task):
        done = make_task("Done").mark_complete(Mood.CALM, now)
        open_task = make_task("Open")
        assert schedule([done, open_task], Mood.CALM, now) == [open_task]

    def test_completed_tasks_included_on_request(self, now, make_task):
        done = make_task("Done").mark_complete(Mood.CALM, now)
        assert schedule([done], Mood.CALM, now, include_completed=True) == [done]

    def test_result_never_exceeds_optimal_count(self, now, make_task):
        tasks = [make_task(f"Task {i}") for i in range(12)]
        for mood in Mood:
            result = schedule(tasks, mood, now)
            assert len(result) <= optimal_task_count(mood)
            assert len(set(t.id for t in result)) == len(result)

    def test_unbounded_returns_everything(self, now, make_task):
        tasks = [make_task(f"Task {i}") for i in range(12)]
        assert len(schedule(tasks, Mood.TIRED, now, bounded=False)) == 12

    def test_stressed_scenario(self, now, make_task):
        calming = [make_task(f"Calm {i}", emotion=Emotion.CALMING) for i in range(5)]
        stressful = [make_task(f"Stress {i}", emotion=Emotion.STRESSFUL) for i in range(5)]

        result = schedule(stressful + calming, Mood.STRESSED, now)

        assert len(result) == 3
        assert all(t.emotion == Emotion.CALMING for t in result)

    def test_stressed_high_focused_ties_medium_calming(self, now, make_task):
        # High non-affine (3 + 0) ties Medium affine (2 + 1)
        f1 = make_task("Focus 1", priority=Priority.HIGH, emotion=Emotion.FOCUSED, reminder_at=now + timedelta(days=2))
        f2 = make_task("Focus 2", priority=Priority.HIGH, emotion=Emotion.FOCUSED, reminder_at=now + timedelta(days=1))
        f3 = make_task("Focus 3", priority=Priority.HIGH, emotion=Emotion.FOCUSED, created_at=now - timedelta(hours=2))
        c1 = make_task("Calm 1", emotion=Emotion.CALMING, reminder_at=now + timedelta(days=1, hours=12))
        c2 = make_task("Calm 2", emotion=Emotion.CALMING, created_at=now - timedelta(hours=3))
        tasks = [f1, f2, f3, c1, c2]

        ranked = TaskScheduler().rank(tasks, Mood.STRESSED, now, bounded=False)
        assert {e.dynamic_priority for e in ranked} == {3}
        # Due time first, undated last by creation time
        assert [e.task for e in ranked] == [f2, c1, f1, c2, f3]

        assert schedule(tasks, Mood.STRESSED, now) == [f2, c1, f1]

    def test_base_priority_beats_affinity(self, now, make_task):
        urgent = make_task("Urgent", priority=Priority.HIGH, emotion=Emotion.STRESSFUL)
        soothing = make_task("Soothing", priority=Priority.LOW, emotion=Emotion.CALMING)

        scheduler = TaskScheduler()
        assert scheduler.dynamic_priority(urgent, Mood.STRESSED, now) == 3
        assert scheduler.dynamic_priority(soothing, Mood.STRESSED, now) == 2
        assert schedule([soothing, urgent], Mood.STRESSED, now) == [urgent, soothing]

    def test_priority_orders_first(self, now, make_task):
        low = make_task("Low", priority=Priority.LOW)
        high = make_task("High", priority=Priority.HIGH)
        assert schedule([low, high], Mood.CALM, now) == [high, low]

    def test_due_time_breaks_ties(self, now, make_task):
        later = make_task("Later", reminder_at=now + timedelta(hours=5))
        sooner = make_task("Sooner", reminder_at=now + timedelta(hours=1))
        undated = make_task("Undated")
        assert schedule([undated, later, sooner], Mood.CALM, now) == [sooner, later, undated]

    def test_creation_time_breaks_remaining_ties(self, now, make_task):
        newer = make_task("Newer", created_at=now - timedelta(hours=1))
        older = make_task("Older", created_at=now - timedelta(hours=2))
        assert schedule([newer, older], Mood.CALM, now) == [older, newer]

    def test_stable_for_full_ties(self, now, make_task):
        a, b = make_task("A"), make_task("B")
        assert schedule([a, b], Mood.CALM, now) == [a, b]
        assert schedule([b, a], Mood.CALM, now) == [b, a]

    def test_input_not_mutated(self, now, make_task):
        tasks = [make_task("B", priority=Priority.LOW), make_task("A", priority=Priority.HIGH)]
        before = list(tasks)
        schedule(tasks, Mood.CALM, now)
        assert tasks == before

    def test_policy_gap_fails_even_for_empty_input(self, now):
        scheduler = TaskScheduler()
        del scheduler.policy.table[Mood.TIRED]
        with pytest.raises(MoodPolicyError):
            scheduler.schedule([], Mood.TIRED, now)


class TestEscalation:

    def test_old_task_escalates(self, now, make_task):
        scheduler = TaskScheduler()
        fresh = make_task("Fresh")
        stale = make_task("Stale", created_at=now - timedelta(days=4))

        assert not scheduler.is_escalated(fresh, now)
        assert scheduler.is_escalated(stale, now)
        assert scheduler.dynamic_priority(stale, Mood.CALM, now) > scheduler.dynamic_priority(fresh, Mood.CALM, now)

    def test_overdue_task_escalates(self, now, make_task):
        overdue = make_task("Overdue", deadline_at=now - timedelta(minutes=1))
        assert TaskScheduler().is_escalated(overdue, now)

    def test_due_soon_window(self, now, make_task):
        task = make_task("Soon", reminder_at=now + timedelta(hours=2))
        assert not TaskScheduler().is_escalated(task, now)
        assert TaskScheduler(due_soon_window=timedelta(hours=3)).is_escalated(task, now)

    def test_estimated_duration_brings_deadline_forward(self, now, make_task):
        slides = make_task("Prepare presentation slides", deadline_at=now + timedelta(hours=3))
        plants = make_task("Water plants", deadline_at=now + timedelta(hours=3))
        scheduler = TaskScheduler()

        assert scheduler.has_deadline_pressure(slides, now)
        assert not scheduler.has_deadline_pressure(plants, now)
        assert schedule([plants, slides], Mood.CALM, now) == [slides, plants]

        entry = scheduler.rank([slides], Mood.CALM, now)[0]
        assert entry.escalated and entry.deadline_pressure

    def test_duration_estimate_can_be_disabled(self, now, make_task):
        slides = make_task("Prepare presentation slides", deadline_at=now + timedelta(hours=3))
        scheduler = TaskScheduler(duration_aware=False)

        assert scheduler.lead_time(slides) == timedelta(0)
        assert not scheduler.is_escalated(slides, now)
        assert scheduler.is_escalated(slides, now + timedelta(hours=3))

    def test_undated_task_has_no_deadline_pressure(self, now, make_task):
        assert not TaskScheduler().has_deadline_pressure(make_task("Project plan"), now)

    def test_completed_never_escalates(self, now, make_task):
        task = make_task("Old", created_at=now - timedelta(days=30)).mark_complete(at=now)
        assert not TaskScheduler().is_escalated(task, now)

    def test_escalation_is_monotonic_in_time(self, now, make_task):
        scheduler = TaskScheduler()
        task = make_task("Task", reminder_at=now + timedelta(days=1))
        previous = scheduler.dynamic_priority(task, Mood.CALM, now)
        for hours in range(1, 120, 6):
            current = scheduler.dynamic_priority(task, Mood.CALM, now + timedelta(hours=hours))
            assert current >= previous
            previous = current

    def test_escalated_task_overtakes_peer(self, now, make_task):
        fresh = make_task("Fresh", created_at=now)
        stale = make_task("Stale", created_at=now - timedelta(days=5))
        assert schedule([fresh, stale], Mood.CALM, now) == [stale, fresh]


class TestAffinity:

    def test_affine_emotion_bonus(self, now, make_task):
        scheduler = TaskScheduler()
        creative = make_task("Sketch", emotion=Emotion.CREATIVE)
        routine = make_task("Laundry", emotion=Emotion.ROUTINE)

        ranked = scheduler.rank([routine, creative], Mood.ENERGIZED, now)

        assert ranked[0].task is creative
        assert ranked[0].affine is True
        assert ranked[1].affine is False

    def test_custom_policy(self, now, make_task):
        policy = MoodPolicy(adjust_for_time_of_day=True)
        scheduler = TaskScheduler(policy=policy)
        tasks = [make_task(f"Task {i}") for i in range(10)]
        late = now.replace(hour=22)
        assert len(scheduler.schedule(tasks, Mood.ENERGIZED, late)) == 4
