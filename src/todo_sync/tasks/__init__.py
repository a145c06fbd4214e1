"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft, TaskStatus)
- task_repository.py: in-memory collection + optimistic mutation/reconciliation
- task_view.py: filter/search/sort projection and counts
- task_form.py: add/edit submission session
"""
