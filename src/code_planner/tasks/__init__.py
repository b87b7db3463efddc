"""
Task subsystem.

Components:
- task_models.py: data structures (TaskRecord) and JSON conversion
- task_store.py: task list persisted in one storage slot
- generator.py: initial task list from a project description
- updater.py: regenerate guidance for incomplete tasks
- task_view.py: filtering / ordering / progress helpers
- language.py: code snippet language detection
- task_api.py: generate/update + persist, used by the console
"""
