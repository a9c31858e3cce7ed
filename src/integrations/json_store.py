"""
JSON Task Store

Keeps tasks and mood entries in a single JSON cache file.

Layout:
    {
      "tasks": [ {task dict}, ... ],
      "moods": [ {mood entry dict}, ... ]
    }

No persistence guarantees: the whole file is rewritten on every change and a
corrupt file is treated as empty.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from mood_engine.models import MoodEntry, Task


class JsonTaskStore:
    """File-backed collection of tasks and mood entries"""

    def __init__(self, path: Path):
        """
        Initialize store

        Args:
            path: JSON file location (parent directory is created if missing)
        """
        self.path = Path(path)
        self.logger = logging.getLogger("MoodTasks.Store")

        self.path.parent.mkdir(parents=True, exist_ok=True)

    # ==================== Tasks ====================

    def get_tasks(self) -> List[Task]:
        """
        Get all tasks

        Returns:
            Id-unique list of tasks in stored order (later duplicates dropped)
        """
        tasks = []
        seen = set()

        for raw in self._read().get('tasks', []):
            try:
                task = Task.from_dict(raw)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                self.logger.warning(f"⚠️  Skipping unreadable task record: {e}")
                continue

            if task.id in seen:
                self.logger.warning(f"⚠️  Duplicate task id {task.id} in store, keeping first")
                continue

            seen.add(task.id)
            tasks.append(task)

        return tasks

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.get_tasks():
            if task.id == task_id:
                return task
        return None

    def save_task(self, task: Task) -> Task:
        """
        Insert a new task or replace the stored one with the same id

        Returns:
            The saved task
        """
        data = self._read()
        records = data.setdefault('tasks', [])

        for i, raw in enumerate(records):
            if raw.get('id') == task.id:
                records[i] = task.to_dict()
                self.logger.debug(f"Updated task {task.id}")
                break
        else:
            records.append(task.to_dict())
            self.logger.debug(f"Added task {task.id}")

        self._write(data)
        return task

    def delete_task(self, task_id: str) -> bool:
        data = self._read()
        records = data.get('tasks', [])
        remaining = [raw for raw in records if raw.get('id') != task_id]

        if len(remaining) == len(records):
            self.logger.warning(f"Task {task_id} not found in store")
            return False

        data['tasks'] = remaining
        self._write(data)
        return True

    # ==================== Mood entries ====================

    def get_mood_entries(self) -> List[MoodEntry]:
        """Mood history, oldest first"""
        entries = []
        for raw in self._read().get('moods', []):
            try:
                entries.append(MoodEntry.from_dict(raw))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                self.logger.warning(f"⚠️  Skipping unreadable mood record: {e}")

        return sorted(entries, key=lambda e: e.timestamp)

    def latest_mood_entry(self) -> Optional[MoodEntry]:
        entries = self.get_mood_entries()
        return entries[-1] if entries else None

    def add_mood_entry(self, entry: MoodEntry) -> MoodEntry:
        data = self._read()
        data.setdefault('moods', []).append(entry.to_dict())
        self._write(data)
        self.logger.debug(f"Logged mood {entry.mood.value} at {entry.timestamp}")
        return entry

    def delete_mood_entry(self, entry_id: str) -> bool:
        data = self._read()
        records = data.get('moods', [])
        remaining = [raw for raw in records if raw.get('id') != entry_id]

        if len(remaining) == len(records):
            self.logger.warning(f"Mood entry {entry_id} not found in store")
            return False

        data['moods'] = remaining
        self._write(data)
        return True

    # ==================== File I/O ====================

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {'tasks': [], 'moods': []}

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"❌ Failed to parse store file {self.path}: {e}")
            return {'tasks': [], 'moods': []}

        if not isinstance(data, dict):
            self.logger.error(f"❌ Unexpected store layout in {self.path}, treating as empty")
            return {'tasks': [], 'moods': []}

        for key in ('tasks', 'moods'):
            data[key] = self._records(data.get(key), key)

        return data

    def _records(self, records: Any, key: str) -> List[Dict[str, Any]]:
        """Keep only object records; anything else is logged and dropped"""
        if records is None:
            return []

        if not isinstance(records, list):
            self.logger.warning(f"⚠️  '{key}' in {self.path} is not a list, ignoring it")
            return []

        valid = [raw for raw in records if isinstance(raw, dict)]
        if len(valid) != len(records):
            self.logger.warning(f"⚠️  Skipping {len(records) - len(valid)} malformed {key} record(s)")
        return valid

    def _write(self, data: Dict[str, Any]) -> None:
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2)
