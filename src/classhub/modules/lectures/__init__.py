"""
Lectures module - a tree of lecture nodes.
"""

from classhub.modules.lectures.models import Lecture

__all__ = ["Lecture"]
