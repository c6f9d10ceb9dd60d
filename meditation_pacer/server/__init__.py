"""HTTP API for the meditation pacer (FastAPI)."""
