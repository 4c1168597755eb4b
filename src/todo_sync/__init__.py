"""
todo_sync: keeps a local task list in sync with a remote todo store.

Subpackages:
- core: data model, errors, ports (Protocols), AppState
- remote: HTTP store client, wire codec, in-memory demo store
- sync: registry, filters, per-id locks, notifications, coordinator
- connectors: console front-end and text formatting
- cli: composition root, slash commands, entry point
"""

__version__ = "0.1.0"
