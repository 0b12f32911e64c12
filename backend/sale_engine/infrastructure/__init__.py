"""Infrastructure Layer - file loading and cross-cutting concerns around the core.

Invariants:
    - Infrastructure may import core/ types but core/ never imports infrastructure
    - Every IO failure is mapped to a SaleEngineError subclass
"""
