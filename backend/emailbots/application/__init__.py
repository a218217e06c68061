"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (CQRS), one handler per entity service call
- queries/   → Read operations (CQRS), the five dashboard lists
- store.py   → DashboardStore, the single owner of the dashboard snapshot
- settings.py → Settings schema and validation
- transfer.py → Conversation CSV export, question file import
- dto/       → Data Transfer Objects
- common/    → Shared interfaces (Command, Query base classes, ServiceResult)

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
- Coordinates entities, repositories, external services
"""
