"""
Task subsystem.

Components:
- task_queue.py: FIFO of queued reaction tasks, single-wave and recursive flush
- backend.py: PromiseBackend, install/restore of the mock and the scope hooks
"""
