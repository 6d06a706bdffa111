"""
Quest store subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, MilestoneTag)
- task_store.py: SQLite-backed storage + list/update helpers used by the planner
"""
