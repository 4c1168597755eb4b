"""
Sync subsystem.

Components:
- registry.py: in-memory mirror of the task collection (TaskRegistry)
- filters.py: pure visible-set and counter derivation
- locks.py: per-task-id FIFO locks
- notifications.py: notice routing and the counted busy signal
- coordinator.py: optimistic commands with rollback (SyncCoordinator)
"""
