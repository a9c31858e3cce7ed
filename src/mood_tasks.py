#!/usr/bin/env python3
"""
MoodTasks Agent

Mood-adaptive personal task manager that:
1. Turns free text into structured tasks (title, priority, emotion, reminder, tags)
2. Tracks the user's self-reported mood
3. Picks a working set sized for the current mood
4. Orders it by priority, mood affinity and task aging
5. Records completions together with the mood they were finished in
"""

import sys
import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from datetime import datetime, timedelta

from mood_engine import (
    Emotion,
    Insight,
    Mood,
    MoodContext,
    MoodEntry,
    MoodPolicy,
    Priority,
    ScheduleEntry,
    Task,
    TaskDraft,
    TaskScheduler,
    generate_insights,
    translate,
)


DEFAULT_CONFIG: Dict[str, Any] = {
    'store': {'path': 'data/moodtasks.json'},
    'mood': {'default': 'calm', 'time_of_day_adjustment': False},
    'scheduler': {'escalation_window_days': 3, 'due_soon_hours': 0, 'duration_aware': True},
    'logging': {'level': 'INFO'},
}


def _log_level(level: Any):
    """Accept a level name in any case ('debug') or a numeric level (10)"""
    if isinstance(level, int):
        return level
    return str(level).upper()


class MoodTaskManager:
    """
    Self-contained mood-aware task agent

    Wires the JSON store, the mood context, the translator and the scheduler.
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize MoodTaskManager with configuration"""
        self.logger = self._setup_logging()
        self.project_root = self._detect_project_root()
        self.config = self._load_config(config_path)

        self.logger.setLevel(_log_level(self.config['logging'].get('level', 'INFO')))

        from integrations import JsonTaskStore

        store_path = Path(self.config['store']['path'])
        if not store_path.is_absolute():
            store_path = self.project_root / store_path
        self._store = JsonTaskStore(store_path)

        mood_config = self.config['mood']
        self.policy = MoodPolicy(adjust_for_time_of_day=bool(mood_config.get('time_of_day_adjustment', False)))

        scheduler_config = self.config['scheduler']
        self.scheduler = TaskScheduler(
            policy=self.policy,
            escalation_window=timedelta(days=scheduler_config.get('escalation_window_days', 3)),
            due_soon_window=timedelta(hours=scheduler_config.get('due_soon_hours', 0)),
            duration_aware=bool(scheduler_config.get('duration_aware', True)),
        )

        # Last logged mood wins over the configured default
        latest = self._store.latest_mood_entry()
        initial_mood = latest.mood if latest else Mood.parse(mood_config.get('default', 'calm'))
        self.mood = MoodContext(initial_mood, policy=self.policy)

        self.logger.info(f"✅ MoodTaskManager initialized (mood: {initial_mood.value})")

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for the agent"""
        logger = logging.getLogger("MoodTasks")

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - MoodTasks - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)

        return logger

    def _detect_project_root(self) -> Path:
        """Detect project root directory"""
        current_path = Path(__file__).resolve()

        # Look for project markers
        for parent in current_path.parents:
            if (parent / 'pyproject.toml').exists() or (parent / 'config' / 'config.yaml').exists():
                return parent

        # Fallback
        return Path.cwd()

    def _load_config(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load configuration from YAML file, filling gaps with defaults"""
        if config_path is None:
            config_path = self.project_root / 'config' / 'config.yaml'
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}

        config = {}
        for section, defaults in DEFAULT_CONFIG.items():
            config[section] = {**defaults, **(loaded.get(section) or {})}
        return config

    # ==================== Intake ====================

    def parse(self, text: str, now: Optional[datetime] = None) -> TaskDraft:
        """
        Preview how text would be turned into a task (nothing is stored)

        Args:
            text: Free text, typed or transcribed
            now: Reference time for relative reminders

        Returns:
            TaskDraft
        """
        return translate(text, now or datetime.now())

    def add_task_from_text(self, text: str, now: Optional[datetime] = None) -> Optional[Task]:
        """
        Translate text and store the resulting task

        Returns:
            Stored Task, or None if the text was blank
        """
        if not text or not text.strip():
            self.logger.warning("⚠️  Ignoring blank task text")
            return None

        now = now or datetime.now()
        draft = translate(text, now)
        task = self._store.save_task(draft.to_task(created_at=now))

        self.logger.info(
            f"✅ Added '{task.title}' [{task.priority.value}/{task.emotion.value}]"
            + (f" reminder {task.reminder_at:%Y-%m-%d %H:%M}" if task.reminder_at else "")
        )
        return task

    def add_task(self, task: Task) -> Task:
        """Store an already structured task"""
        saved = self._store.save_task(task)
        self.logger.info(f"✅ Added '{saved.title}'")
        return saved

    # ==================== Mood ====================

    def current_mood(self) -> Mood:
        return self.mood.current()

    def log_mood(self, mood: Mood, at: Optional[datetime] = None) -> MoodEntry:
        """
        Record a mood and make it the current one

        Args:
            mood: Self-reported mood
            at: Timestamp of the entry (defaults to now)

        Returns:
            Stored MoodEntry
        """
        entry = MoodEntry(mood=mood, timestamp=at or datetime.now())
        self.mood.set(mood)
        self._store.add_mood_entry(entry)
        return entry

    def mood_history(self, limit: Optional[int] = None) -> List[MoodEntry]:
        """Logged moods, newest first"""
        entries = list(reversed(self._store.get_mood_entries()))
        return entries[:limit] if limit is not None else entries

    def delete_mood_entry(self, entry_id: str) -> bool:
        """
        Remove a logged mood

        The current mood is left as is; it only changes through log_mood().
        """
        if self._store.delete_mood_entry(entry_id):
            self.logger.info(f"✅ Deleted mood entry {entry_id}")
            return True
        return False

    # ==================== Scheduling ====================

    def recommend(
        self,
        now: Optional[datetime] = None,
        mood: Optional[Mood] = None,
        include_completed: bool = False
    ) -> List[ScheduleEntry]:
        """
        Working set for the current (or given) mood

        Returns:
            Schedule entries, best first, at most optimal_task_count(mood)
        """
        now = now or datetime.now()
        mood = mood or self.mood.current()
        tasks = self._store.get_tasks()

        entries = self.scheduler.rank(tasks, mood, now, include_completed=include_completed)
        self.logger.info(f"Recommending {len(entries)} of {len(tasks)} tasks for mood '{mood.value}'")
        return entries

    def list_tasks(
        self,
        include_completed: bool = True,
        priority: Optional[Priority] = None,
        emotion: Optional[Emotion] = None,
        tag: Optional[str] = None
    ) -> List[Task]:
        """
        All stored tasks, oldest first, optionally filtered

        Args:
            include_completed: Keep completed tasks
            priority: Only this priority
            emotion: Only this emotion
            tag: Only tasks carrying this tag

        Returns:
            List of tasks
        """
        tasks = self._store.get_tasks()

        if not include_completed:
            tasks = [t for t in tasks if not t.completed]
        if priority:
            tasks = [t for t in tasks if t.priority == priority]
        if emotion:
            tasks = [t for t in tasks if t.emotion == emotion]
        if tag:
            tasks = [t for t in tasks if tag.lower() in (x.lower() for x in t.tags)]

        return sorted(tasks, key=lambda t: t.created_at)

    def get_task(self, task_id: str) -> Optional[Task]:
        return self._store.get_task(task_id)

    # ==================== Task updates ====================

    def complete_task(self, task_id: str, now: Optional[datetime] = None) -> bool:
        """
        Mark task complete, stamping the current mood

        Returns:
            True if the task exists (completing twice is a no-op), False otherwise
        """
        task = self._store.get_task(task_id)
        if task is None:
            self.logger.error(f"❌ Task {task_id} not found")
            return False

        if task.completed:
            self.logger.info(f"Task {task_id} already complete")
            return True

        self._store.save_task(task.mark_complete(self.mood.current(), now or datetime.now()))
        self.logger.info(f"✅ Completed '{task.title}' while {self.mood.current().value}")
        return True

    def reopen_task(self, task_id: str) -> bool:
        task = self._store.get_task(task_id)
        if task is None:
            self.logger.error(f"❌ Task {task_id} not found")
            return False

        if task.completed:
            self._store.save_task(task.mark_incomplete())
            self.logger.info(f"✅ Reopened '{task.title}'")
        return True

    def toggle_flag(self, task_id: str) -> Optional[bool]:
        """
        Flip a task's flagged/important marker

        Returns:
            New flag value, or None if the task does not exist
        """
        task = self._store.get_task(task_id)
        if task is None:
            self.logger.error(f"❌ Task {task_id} not found")
            return None

        task.flagged = not task.flagged
        self._store.save_task(task)
        return task.flagged

    def delete_task(self, task_id: str) -> bool:
        if self._store.delete_task(task_id):
            self.logger.info(f"✅ Deleted task {task_id}")
            return True
        return False

    # ==================== Insights ====================

    def insights(self) -> List[Insight]:
        """Patterns found in the mood history and the task collection"""
        insights = generate_insights(self._store.get_mood_entries(), self._store.get_tasks())
        self.logger.info(f"Found {len(insights)} insights")
        return insights


# ==================== CLI output ====================

def _format_due(task: Task, now: datetime) -> Optional[str]:
    due = task.due_at
    if due is None:
        return None

    label = due.strftime('%Y-%m-%d %H:%M')
    if due <= now:
        return f"{label} (⚠️  OVERDUE)"
    if due.date() == now.date():
        return f"{label} (today)"
    if due.date() == (now + timedelta(days=1)).date():
        return f"{label} (tomorrow)"
    return label


def _print_task(task: Task, now: datetime, index: Optional[int] = None, indent: str = "   ") -> None:
    check = "✅ " if task.completed else ""
    flag = " 🚩" if task.flagged else ""
    prefix = f"{index}. " if index is not None else ""

    print(f"{prefix}{check}[{task.priority.value.upper()}] {task.title}{flag}")
    print(f"{indent}ID: {task.id}")
    print(f"{indent}Emotion: {task.emotion.value}")

    due = _format_due(task, now)
    if due:
        print(f"{indent}Due: {due}")
    if task.tags:
        print(f"{indent}Tags: {', '.join(task.tags)}")
    if task.completed and task.completed_mood:
        print(f"{indent}Completed while: {task.completed_mood.value}")


def _print_draft(draft: TaskDraft) -> None:
    print(f"\n🔍 PARSED TASK:")
    print("=" * 60)
    print(f"   Title:       {draft.title}")
    if draft.description:
        print(f"   Description: {draft.description}")
    print(f"   Priority:    {draft.priority.value}")
    print(f"   Emotion:     {draft.emotion.value}{' (inferred)' if draft.emotion_inferred else ''}")
    print(f"   Complexity:  {draft.complexity:.2f}")
    if draft.reminder_at:
        print(f"   Reminder:    {draft.reminder_at.strftime('%Y-%m-%d %H:%M')}")
    if draft.tags:
        print(f"   Tags:        {', '.join(draft.tags)}")

    if draft.spans:
        print(f"\n   Detected:")
        for span in draft.spans:
            print(f"     • {span.kind.value:<9} '{span.text}' ({span.rule})")
    print()


def main(argv: Optional[List[str]] = None):
    """CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="MoodTasks: mood-adaptive task manager"
    )
    parser.add_argument(
        'command',
        choices=['add', 'parse', 'mood', 'recommend', 'list', 'complete', 'reopen', 'flag', 'delete', 'moods', 'insights'],
        help='Command to execute'
    )
    parser.add_argument(
        'text',
        nargs='*',
        help='Task text (add, parse) or mood name (mood)'
    )
    parser.add_argument(
        '--task-id',
        help='Task ID (for complete, reopen, flag, delete commands)'
    )
    parser.add_argument(
        '--mood',
        choices=[m.value for m in Mood],
        help='Recommend for this mood instead of the current one'
    )
    parser.add_argument(
        '--all',
        action='store_true',
        help='Include completed tasks (for list and recommend commands)'
    )
    parser.add_argument(
        '--priority',
        choices=[p.value for p in Priority],
        help='Filter tasks by priority (for list command)'
    )
    parser.add_argument(
        '--emotion',
        choices=[e.value for e in Emotion],
        help='Filter tasks by emotion (for list command)'
    )
    parser.add_argument(
        '--tag',
        help='Filter tasks by tag (for list command)'
    )
    parser.add_argument(
        '--limit',
        type=int,
        help='Number of entries to show (for moods command)'
    )
    parser.add_argument(
        '--delete-entry',
        help='Mood entry ID to delete (for moods command)'
    )
    parser.add_argument(
        '--config',
        help='Path to config file'
    )

    args = parser.parse_args(argv)
    text = ' '.join(args.text)

    # Initialize agent
    try:
        agent = MoodTaskManager(config_path=args.config)
    except Exception as e:
        print(f"❌ Failed to initialize MoodTaskManager: {e}")
        return 1

    # Clock is read once per command
    now = datetime.now()

    if args.command == 'parse':
        if not text.strip():
            print("❌ Task text required for parse command")
            return 1
        _print_draft(agent.parse(text, now))

    elif args.command == 'add':
        task = agent.add_task_from_text(text, now)
        if task is None:
            print("❌ Task text required for add command")
            return 1
        print(f"\n✅ Task added:\n")
        _print_task(task, now)
        print()

    elif args.command == 'mood':
        if not text.strip():
            print(f"Current mood: {agent.current_mood().value}")
            print(f"Optimal task count: {agent.mood.optimal_task_count(at=now)}")
            return 0
        try:
            mood = Mood.parse(text)
        except ValueError as e:
            print(f"❌ {e}")
            return 1
        agent.log_mood(mood, now)
        print(f"✅ Mood set to {mood.value} ({agent.mood.optimal_task_count(at=now)} tasks)")

    elif args.command == 'recommend':
        mood = Mood.parse(args.mood) if args.mood else agent.current_mood()
        entries = agent.recommend(now, mood=mood, include_completed=args.all)

        print(f"\n📋 RECOMMENDED TASKS for {mood.value.upper()} ({len(entries)}):")
        print("=" * 60)
        print("(Sorted by dynamic priority, then due time)\n")

        if not entries:
            print("✅ Nothing to do - enjoy the break!\n")

        for i, entry in enumerate(entries, 1):
            _print_task(entry.task, now, index=i)
            notes = [f"score {entry.dynamic_priority}"]
            if entry.affine:
                notes.append("💚 mood match")
            if entry.escalated:
                notes.append("⬆️  escalated")
            if entry.deadline_pressure:
                notes.append("⏰ deadline pressure")
            print(f"   {' | '.join(notes)}")
            print()

    elif args.command == 'list':
        tasks = agent.list_tasks(
            include_completed=args.all,
            priority=Priority.parse(args.priority) if args.priority else None,
            emotion=Emotion.parse(args.emotion) if args.emotion else None,
            tag=args.tag,
        )

        print(f"\n📋 {'ALL' if args.all else 'OPEN'} TASKS ({len(tasks)}):")
        print("=" * 60)
        for task in tasks:
            print()
            _print_task(task, now, indent="  ")
        print()

    elif args.command in ('complete', 'reopen', 'flag', 'delete'):
        if not args.task_id:
            print(f"❌ --task-id required for {args.command} command")
            return 1

        if args.command == 'complete':
            ok = agent.complete_task(args.task_id, now)
            message = "marked complete"
        elif args.command == 'reopen':
            ok = agent.reopen_task(args.task_id)
            message = "reopened"
        elif args.command == 'delete':
            ok = agent.delete_task(args.task_id)
            message = "deleted"
        else:
            flagged = agent.toggle_flag(args.task_id)
            ok = flagged is not None
            message = "flagged" if flagged else "unflagged"

        if ok:
            print(f"✅ Task {args.task_id} {message}")
        else:
            print(f"❌ Task {args.task_id} not found")
            return 1

    elif args.command == 'moods':
        if args.delete_entry:
            if agent.delete_mood_entry(args.delete_entry):
                print(f"✅ Mood entry {args.delete_entry} deleted")
                return 0
            print(f"❌ Mood entry {args.delete_entry} not found")
            return 1

        entries = agent.mood_history(limit=args.limit)
        print(f"\n🧠 MOOD HISTORY ({len(entries)}):")
        print("=" * 60)
        for entry in entries:
            print(f"   {entry.timestamp.strftime('%Y-%m-%d %H:%M')}  {entry.mood.value:<10} {entry.id}")
        print()

    elif args.command == 'insights':
        insights = agent.insights()
        print(f"\n💡 INSIGHTS ({len(insights)}):")
        print("=" * 60)

        if not insights:
            print("Not enough history yet - log some moods and finish a few tasks.\n")

        for insight in insights:
            print(f"[{insight.kind.value.upper()}] {insight.title}")
            print(f"   {insight.description}")
            print(f"   → {insight.recommendation}")
            print()

    return 0


if __name__ == '__main__':
    sys.exit(main())
