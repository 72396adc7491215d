"""Infrastructure Layer — database, credential store and logging.

Invariants:
    - Implementations satisfy the Protocols declared in core/repository_protocols.py
"""
