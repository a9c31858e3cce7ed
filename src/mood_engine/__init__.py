"""
Mood-adaptive task intake and scheduling engine
"""

from .models import EMOTION_PRECEDENCE, Emotion, Mood, MoodEntry, Priority, Task
from .insights import Insight, InsightKind, generate_insights
from .mood import MoodContext, MoodPolicy, MoodPolicyError, optimal_task_count
from .patterns import DetectedSpan, SpanKind, extract, extract_tags
from .scheduler import ScheduleEntry, TaskScheduler, schedule
from .scorer import TaskScore, complexity, estimate_duration, infer_emotion, score_task
from .translator import TaskDraft, translate

__all__ = [
    'EMOTION_PRECEDENCE', 'Emotion', 'Mood', 'MoodEntry', 'Priority', 'Task',
    'Insight', 'InsightKind', 'generate_insights',
    'MoodContext', 'MoodPolicy', 'MoodPolicyError', 'optimal_task_count',
    'DetectedSpan', 'SpanKind', 'extract', 'extract_tags',
    'ScheduleEntry', 'TaskScheduler', 'schedule',
    'TaskScore', 'complexity', 'estimate_duration', 'infer_emotion', 'score_task',
    'TaskDraft', 'translate',
]
