"""Infrastructure Layer — storage engine, sessions, change notifier and logging.

Invariants:
    - Driver exceptions never leave this layer unmapped (StorageFailureError)
    - The notifier never lets an observer failure reach the writer

Design Decisions:
    - Implementations of the core/repository_protocols.py boundaries live here
"""
