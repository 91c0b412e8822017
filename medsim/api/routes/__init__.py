"""Route Modules: one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic (delegate to services)
    - A failed Outcome is raised as its MedSimError and rendered by the global handler
"""
