"""Web API contract models using Pydantic for validation."""
