# config.py
from dataclasses import dataclass

@dataclass
class Config:
    """Holds all application configuration."""
    BACKEND_URL: str = "https://robot-search-backend.onrender.com"
    SEARCH_ENDPOINT: str = "/api/search"
    REQUEST_TIMEOUT: float = 30.0
    SEARCH_ERROR_MESSAGE: str = "Search failed. Check that the backend service is running and its API key is valid."
    TAG_ERROR_MESSAGE: str = "Could not load tags, please try again."
    EMPTY_RESULTS_MESSAGE: str = "No matching projects found."
