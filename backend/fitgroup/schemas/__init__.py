"""
FitGroup Backend — Pydantic Request/Response Schemas

Schemas are separate from SQLAlchemy models: the wire format is camelCase,
carries epoch-millisecond timestamps and never exposes passwords.
"""
