"""HTTP API for HashSign (FastAPI)."""
