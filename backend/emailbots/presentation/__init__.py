"""
Presentation Layer - HTTP surface over the dashboard store.

- api/          → FastAPI routers (thin: parse, call the store, serialize)
- dependencies/ → auth dependency
- store_registry.py → one DashboardStore per signed-in identity
"""
