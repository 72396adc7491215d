"""Cash Card API Package — per-owner ledger of monetary cards.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
