"""
Models package - Pydantic models for type-safe admission handling.

Defines data models for:
- Deployment custom resource (the admission candidate)
- Field violations and admission decisions
"""
