"""Services Layer: stateful owners of features, simulated time, appointments and the patient.

Invariants:
    - Each service owns its own lock; locks nest one way only (clock advance -> ledger,
      governor insurance change -> patient registry),
      and the ledger reads feature state without taking the governor's lock
    - Services call core/ for rules and never import from api/

Design Decisions:
    - Explicit wiring in simulation.py, no singletons
"""
