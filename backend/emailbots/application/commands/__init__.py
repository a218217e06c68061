"""
COMMANDS - Write operations (CQRS)

Each command has:
- Command class: frozen dataclass carrying the caller identity and payload
- Handler class: runs the write and returns a ServiceResult

Subfolders:
- bots/           → create, update, delete, provision_assistant, reconcile sweep,
                    issue_api_key
- templates/      → create, update, delete
- knowledge_base/ → create, update, delete
- fine_tuning/    → create, update, delete (with bot associations)
"""
