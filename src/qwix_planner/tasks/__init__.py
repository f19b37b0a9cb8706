"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskPriority, DependencyLink)
- task_store.py: SQLite-backed storage + query/update helpers
- task_graph.py: atom space and dependency links derived from a task collection
- task_eligibility.py: "can this task start?" check
- task_activation.py: spreading-activation urgency scores
- task_toposort.py: dependency-respecting order with cycle fail-soft
- task_scheduler.py: final recommended order and next-task query
- task_stats.py: aggregate numbers for analytics views
- task_api.py: small high-level helpers used by the rest of the app
"""
