"""Services Layer — orchestrates core rules around repository calls.

Invariants:
    - Services depend on core protocols, never on concrete infrastructure
"""
