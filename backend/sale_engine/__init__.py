"""Sale Schedule Engine - pricing and vesting calculations for a phased token sale.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
