"""
Tests for complexity and emotion scoring

Run with: pytest tests/
"""

from mood_engine.models import EMOTION_PRECEDENCE, Emotion, Priority
from datetime import timedelta

from mood_engine.scorer import EMOTION_KEYWORD_RULES, complexity, estimate_duration, infer_emotion, score_task


class TestComplexity:

    def test_simple_task_scores_zero(self):
        assert complexity("Buy milk") == 0.0

    def test_heavy_task_scores_higher(self):
        simple = complexity("Buy milk")
        heavy = complexity("Analyze and implement a comprehensive database migration strategy")
        assert heavy > simple
        assert heavy >= 0.8

    def test_score_is_clamped(self):
        text = ("Research, design, develop and implement then analyze and migrate "
                "several detailed comprehensive thorough modules over multiple weeks")
        assert complexity(text) == 1.0

    def test_empty_text(self):
        assert complexity("") == 0.0
        assert complexity(None) == 0.0

    def test_description_counts(self):
        assert complexity("Plan trip", "Book hotels and then flights for several days") > complexity("Plan trip")

    def test_duration_mentions(self):
        assert complexity("Paint fence, takes a few hours") > complexity("Paint fence")

    def test_keyword_inside_unrelated_word_does_not_count(self):
        assert complexity("Water plants") == complexity("Water roses") == 0.0
        assert complexity("Visit the planet exhibit") == complexity("Visit the museum exhibit")
        # "call", "text" and "pay" would otherwise lower the score
        assert complexity("Calligraphy practice") == complexity("Pottery practice")
        assert complexity("Sell old textbook") == complexity("Sell old bicycle")
        assert complexity("Payroll export") == complexity("Invoice export")

    def test_inflected_keywords_still_count(self):
        assert complexity("Planning the migration") == 0.5
        assert complexity("Reviewed plans") == 0.4


class TestInferEmotion:

    def test_rules_follow_shared_precedence(self):
        assert tuple(e for e, _ in EMOTION_KEYWORD_RULES) == EMOTION_PRECEDENCE

    def test_keyword_rules(self):
        assert infer_emotion("Pay bill asap") == Emotion.STRESSFUL
        assert infer_emotion("Worried about the exam") == Emotion.ANXIOUS
        assert infer_emotion("Sketch logo ideas") == Emotion.CREATIVE
        assert infer_emotion("Morning workout") == Emotion.ENERGIZING
        assert infer_emotion("Do laundry") == Emotion.ROUTINE

    def test_first_rule_wins(self):
        # "deadline" (stress) beats "family" (calming)
        assert infer_emotion("Family photo book deadline") == Emotion.STRESSFUL

    def test_work_cue_depends_on_complexity(self):
        assert infer_emotion("Weekly meeting") == Emotion.ROUTINE
        assert infer_emotion("Project review", complexity_score=0.9) == Emotion.FOCUSED

    def test_complexity_bands_without_keywords(self):
        assert infer_emotion("Untitled", complexity_score=0.85) == Emotion.FOCUSED
        assert infer_emotion("Untitled", complexity_score=0.65, priority=Priority.HIGH) == Emotion.FOCUSED
        assert infer_emotion("Untitled", complexity_score=0.65) == Emotion.ROUTINE
        assert infer_emotion("Untitled", complexity_score=0.4) == Emotion.ROUTINE
        assert infer_emotion("Untitled", complexity_score=0.1) == Emotion.CALMING


class TestEstimateDuration:

    def test_keyword_sets_duration(self):
        assert estimate_duration("Prepare presentation slides") == timedelta(hours=4)
        assert estimate_duration("Call mom") == timedelta(minutes=30)
        assert estimate_duration("Reply", "email the landlord") == timedelta(minutes=15)

    def test_longest_job_wins(self):
        assert estimate_duration("Project meeting") == timedelta(hours=8)

    def test_priority_default(self):
        assert estimate_duration("Water plants", priority=Priority.HIGH) == timedelta(hours=2)
        assert estimate_duration("Water plants") == timedelta(hours=1)
        assert estimate_duration("Water plants", priority=Priority.LOW) == timedelta(minutes=30)


class TestScoreTask:

    def test_combines_complexity_and_emotion(self):
        score = score_task("Call dad")
        assert score.complexity == 0.0
        assert score.emotion == Emotion.CALMING
