"""Services Layer — PetProvider, the read/write surface over the pets table.

Invariants:
    - Route, validate, store, notify: always in that order

Design Decisions:
    - Storage and notifier injected through protocols so tests swap them freely
"""
