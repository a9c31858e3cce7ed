"""
Tests for the pattern extractor

Run with: pytest tests/
"""

from datetime import timedelta

from mood_engine.models import Emotion, Priority
from mood_engine.patterns import SpanKind, extract, extract_tags, spans_of


class TestExtract:
    """Span detection"""

    def test_empty_text_has_no_spans(self):
        assert extract("") == []
        assert extract(None) == []

    def test_offsets_point_into_original_text(self):
        text = "Call mom tomorrow at 3pm, it's urgent"
        for span in extract(text):
            assert text[span.start:span.end] == span.text
            assert span.length == len(span.text)

    def test_categories_in_evaluation_order(self):
        spans = extract("urgent: stressed about work tomorrow at 5pm")
        kinds = [s.kind for s in spans]
        order = [SpanKind.TIME, SpanKind.DATE, SpanKind.PRIORITY, SpanKind.EMOTION]
        assert kinds == sorted(kinds, key=order.index)

    def test_twelve_hour_clock(self):
        time_spans = spans_of(extract("meet at 3:30 pm"), SpanKind.TIME)
        assert time_spans[0].rule == 'clock_ampm'
        assert time_spans[0].value == (15, 30)

    def test_hour_with_meridiem(self):
        spans = spans_of(extract("call at 12am"), SpanKind.TIME)
        assert spans[0].value == (0, 0)
        assert spans[0].text == "at 12am"

    def test_invalid_clock_is_rejected(self):
        assert spans_of(extract("at 25:00"), SpanKind.TIME) == []
        assert spans_of(extract("13pm"), SpanKind.TIME) == []

    def test_relative_durations(self):
        spans = spans_of(extract("ping in 15 minutes or in 2 hours"), SpanKind.TIME)
        values = {s.rule: s.value for s in spans}
        assert values['in_minutes'] == timedelta(minutes=15)
        assert values['in_hours'] == timedelta(hours=2)

    def test_oversized_duration_is_ignored(self):
        assert [s for s in extract("Stretch in 99999999999999 minutes") if s.rule == 'in_minutes'] == []
        assert [s for s in extract("in 1234567 hours") if s.rule == 'in_hours'] == []

    def test_largest_accepted_duration(self):
        spans = [s for s in extract("in 999999 minutes") if s.rule == 'in_minutes']
        assert spans[0].value == timedelta(minutes=999999)

    def test_spans_may_overlap(self):
        spans = spans_of(extract("at 10:30"), SpanKind.TIME)
        rules = [s.rule for s in spans]
        assert 'at_clock' in rules and 'bare_clock' in rules
        assert spans[0].overlaps(spans[1])

    def test_dates(self):
        spans = spans_of(extract("today, on Friday, next week and Mar 3rd"), SpanKind.DATE)
        values = {s.rule: s.value for s in spans}
        assert values['relative'] == 'today'
        assert values['weekday'] == 'friday'
        assert values['next_this'] == ('next', 'week')
        assert values['month_day'] == (3, 3)

    def test_invalid_month_day_is_rejected(self):
        assert [s for s in extract("feb 30") if s.rule == 'month_day'] == []

    def test_priority_words(self):
        spans = spans_of(extract("ASAP, but the rest can wait until later"), SpanKind.PRIORITY)
        assert [s.value for s in spans] == [Priority.HIGH, Priority.LOW]

    def test_emotion_words(self):
        spans = spans_of(extract("feeling nervous, need to relax"), SpanKind.EMOTION)
        assert [s.value for s in spans] == [Emotion.ANXIOUS, Emotion.CALMING]


class TestExtractTags:
    """Hashtags, mentions and contextual keywords"""

    def test_hashtags_and_mentions(self):
        tags = extract_tags("Review PR #Backend with @alice")
        assert tags[:2] == ['backend', '@alice']

    def test_contextual_keywords(self):
        tags = extract_tags("Buy groceries then go to the gym")
        assert 'shopping' in tags
        assert 'health' in tags

    def test_tags_are_unique(self):
        tags = extract_tags("#work meeting about work")
        assert tags.count('work') == 1

    def test_no_tags(self):
        assert extract_tags("") == []
