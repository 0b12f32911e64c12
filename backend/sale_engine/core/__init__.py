"""Core Layer - pure sale arithmetic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from api/, schemas/ or infrastructure/
    - All functions are pure and deterministic over an immutable SaleContext
"""
