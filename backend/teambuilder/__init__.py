"""TeamBuilder Application Package — team membership and invitation backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
