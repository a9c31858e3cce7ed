#!/usr/bin/env python3
"""
mood-tasks CLI

Mood-adaptive task manager: type tasks in plain language, log how you feel,
and get a working set sized and ordered for that mood.

Usage:
    ./mood-tasks.py add <text>                  # Parse and store a task
    ./mood-tasks.py parse <text>                # Preview parsing only
    ./mood-tasks.py mood [name]                 # Show or set current mood
    ./mood-tasks.py recommend                   # Tasks for current mood
    ./mood-tasks.py list                        # List open tasks
    ./mood-tasks.py complete --task-id <id>     # Mark task complete
    ./mood-tasks.py moods                       # Mood history

Examples:
    # Add a task with a reminder
    ./mood-tasks.py add "Urgent: finish report in 2 hours"

    # Tell the app you're stressed, then ask what to do
    ./mood-tasks.py mood stressed
    ./mood-tasks.py recommend

    # Try a different mood without logging it
    ./mood-tasks.py recommend --mood energized
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from mood_tasks import main

if __name__ == '__main__':
    sys.exit(main())
