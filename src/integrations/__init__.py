"""
Integration modules for task and mood storage
"""

from .json_store import JsonTaskStore

__all__ = ['JsonTaskStore']
