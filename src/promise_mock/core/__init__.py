"""
Promise core.

Components:
- models.py: PromiseStatus, Deferred and the task/handler aliases
- ports.py: Protocols the core depends on (task sink, thenable)
- thenables.py: identity-keyed memo of coerced foreign thenables
- promise.py: the Promise state machine
"""
