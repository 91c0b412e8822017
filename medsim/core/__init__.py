"""Core Layer: domain records and pure rules, no IO, no locks, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Check functions are pure and deterministic; services own all mutable state

Design Decisions:
    - Functional core separated from imperative shell: services stage, core decides
"""
