"""
HabitGrid - трекер ежедневных привычек с календарными сетками
"""

__version__ = "1.0.0"
