"""
schemas/ - HTTP Schemas
=======================
Pydantic request and response bodies, one module per entity.
Request bodies are validated before any repository is called.
"""
