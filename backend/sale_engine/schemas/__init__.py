"""Pydantic Schemas - validation for the config file and the HTTP API.

Invariants:
    - Schemas validate at system boundary (config file, user input, API responses)
    - Domain types from core/ used for enum fields
"""
