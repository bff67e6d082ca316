"""
Classrooms module - classrooms and per-classroom student memberships.
"""

from classhub.modules.classrooms.models import Classroom, ClassroomStudent

__all__ = ["Classroom", "ClassroomStudent"]
