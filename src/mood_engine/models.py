"""
Core records shared by the intake and scheduling engine

Task and MoodEntry are owned by the store; the engine only reads them and
hands back new values (Task is treated as a value, see mark_complete()).
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Priority(Enum):
    """Base priority chosen by the user (or the translator)"""
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @property
    def score(self) -> int:
        return _PRIORITY_SCORES[self]

    @classmethod
    def parse(cls, name: str) -> 'Priority':
        return _parse_enum(cls, name)


_PRIORITY_SCORES = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}


class Emotion(Enum):
    """Kind of mental mode a task demands"""
    STRESSFUL = 'stressful'
    ANXIOUS = 'anxious'
    CREATIVE = 'creative'
    ENERGIZING = 'energizing'
    FOCUSED = 'focused'
    CALMING = 'calming'
    ROUTINE = 'routine'

    @classmethod
    def parse(cls, name: str) -> 'Emotion':
        return _parse_enum(cls, name)


class Mood(Enum):
    """User's self-reported state (distinct from a task's emotion)"""
    POSITIVE = 'positive'
    CALM = 'calm'
    FOCUSED = 'focused'
    STRESSED = 'stressed'
    CREATIVE = 'creative'
    ENERGIZED = 'energized'
    TIRED = 'tired'
    ANXIOUS = 'anxious'

    @classmethod
    def parse(cls, name: str) -> 'Mood':
        return _parse_enum(cls, name)


# Single precedence order for every emotion rule table (first match wins)
EMOTION_PRECEDENCE = (
    Emotion.STRESSFUL,
    Emotion.ANXIOUS,
    Emotion.CREATIVE,
    Emotion.ENERGIZING,
    Emotion.FOCUSED,
    Emotion.CALMING,
    Emotion.ROUTINE,
)


def _parse_enum(enum_cls, name: str):
    """Look up an enum member by value or name, case-insensitive"""
    key = (name or '').strip().lower()
    for member in enum_cls:
        if member.value == key or member.name.lower() == key:
            return member
    choices = ', '.join(m.value for m in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__.lower()} '{name}' (expected one of: {choices})")


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Task:
    """A single task as held by the store"""
    title: str
    id: str = field(default_factory=new_id)
    description: Optional[str] = None
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    emotion: Emotion = Emotion.ROUTINE
    reminder_at: Optional[datetime] = None
    deadline_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    completed_mood: Optional[Mood] = None
    tags: List[str] = field(default_factory=list)
    natural_language_input: Optional[str] = None
    flagged: bool = False

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Task title must not be empty")

        # Keep first occurrence of each tag
        unique_tags = []
        for tag in self.tags:
            if tag not in unique_tags:
                unique_tags.append(tag)
        self.tags = unique_tags

    @property
    def due_at(self) -> Optional[datetime]:
        """Earliest of reminder and deadline"""
        times = [t for t in (self.reminder_at, self.deadline_at) if t is not None]
        return min(times) if times else None

    def mark_complete(self, mood: Optional[Mood] = None, at: Optional[datetime] = None) -> 'Task':
        """Return a completed copy, stamping completion time and mood"""
        if self.completed:
            return self
        return replace(
            self,
            completed=True,
            completed_at=at or datetime.now(),
            completed_mood=mood,
        )

    def mark_incomplete(self) -> 'Task':
        """Return a reopened copy with completion stamps cleared"""
        if not self.completed:
            return self
        return replace(self, completed=False, completed_at=None, completed_mood=None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'completed': self.completed,
            'priority': self.priority.value,
            'emotion': self.emotion.value,
            'reminder_at': _iso(self.reminder_at),
            'deadline_at': _iso(self.deadline_at),
            'created_at': _iso(self.created_at),
            'completed_at': _iso(self.completed_at),
            'completed_mood': self.completed_mood.value if self.completed_mood else None,
            'tags': list(self.tags),
            'natural_language_input': self.natural_language_input,
            'flagged': self.flagged,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        completed_mood = data.get('completed_mood')
        return cls(
            id=data['id'],
            title=data['title'],
            description=data.get('description'),
            completed=bool(data.get('completed', False)),
            priority=Priority.parse(data.get('priority', 'medium')),
            emotion=Emotion.parse(data.get('emotion', 'routine')),
            reminder_at=_parse_iso(data.get('reminder_at')),
            deadline_at=_parse_iso(data.get('deadline_at')),
            created_at=_parse_iso(data.get('created_at')) or datetime.now(),
            completed_at=_parse_iso(data.get('completed_at')),
            completed_mood=Mood.parse(completed_mood) if completed_mood else None,
            tags=list(data.get('tags') or []),
            natural_language_input=data.get('natural_language_input'),
            flagged=bool(data.get('flagged', False)),
        )


@dataclass(frozen=True)
class MoodEntry:
    """One logged mood; immutable once created"""
    mood: Mood
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'mood': self.mood.value,
            'timestamp': _iso(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MoodEntry':
        return cls(
            id=data['id'],
            mood=Mood.parse(data['mood']),
            timestamp=_parse_iso(data.get('timestamp')) or datetime.now(),
        )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)
