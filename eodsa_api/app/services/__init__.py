"""
Service layer.

Each service encapsulates the business logic of one domain and talks
to SQLite through ``core.db``.  Services raise the errors defined in
``core.errors``; API handlers only translate requests into service
calls.
"""
