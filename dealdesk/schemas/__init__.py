"""Request/response schemas and domain shapes."""
