"""Web API (FastAPI) for the score table and its exports."""
