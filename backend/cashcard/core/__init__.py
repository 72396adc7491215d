"""Functional Core — pure access rules, query resolution and boundary contracts.

Invariants:
    - Nothing in core/ performs IO or imports from the shell (api, infrastructure, models)
    - Decisions are returned as values; the service layer turns them into errors
"""
