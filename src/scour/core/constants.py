"""Core constants for Scour."""

# Project defaults
DEFAULT_MODE = "basic"
DEFAULT_LLM_PROVIDER = "ollama"
DEFAULT_MODEL_NAME = "llama3.2:3b"
DEFAULT_SEARCH_ENGINE = "Bing"
DEFAULT_NUM_QUERIES = 10
DEFAULT_NUM_RESULTS_PER_QUERY = 10

# Ollama endpoint
DEFAULT_OLLAMA_HOST = "http://localhost"
DEFAULT_OLLAMA_PORT = 11434
DEFAULT_NUM_CTX = 10000

# Network timeouts
DEFAULT_LLM_TIMEOUT = 300.0  # seconds
DEFAULT_RESULTS_TIMEOUT_MS = 5000
DEFAULT_CONSENT_TIMEOUT_MS = 3000
DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
DEFAULT_FETCH_TIMEOUT_MS = 30000

# Delay between search result pages (seconds)
DEFAULT_DELAY_MIN_SECONDS = 2.0
DEFAULT_DELAY_MAX_SECONDS = 5.0

# Results per search engine page, used for page budget estimation
RESULTS_PER_PAGE = 10
EXTRA_PAGES = 2

# Stage limits
DEFAULT_MAX_GENERATION_ROUNDS = 20
DEFAULT_MAX_PAGE_CHARS = 30000

PROJECT_FILE_SUFFIX = ".scour"

__all__ = [
    "DEFAULT_MODE",
    "DEFAULT_LLM_PROVIDER",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_SEARCH_ENGINE",
    "DEFAULT_NUM_QUERIES",
    "DEFAULT_NUM_RESULTS_PER_QUERY",
    "DEFAULT_OLLAMA_HOST",
    "DEFAULT_OLLAMA_PORT",
    "DEFAULT_NUM_CTX",
    "DEFAULT_LLM_TIMEOUT",
    "DEFAULT_RESULTS_TIMEOUT_MS",
    "DEFAULT_CONSENT_TIMEOUT_MS",
    "DEFAULT_NAVIGATION_TIMEOUT_MS",
    "DEFAULT_FETCH_TIMEOUT_MS",
    "DEFAULT_DELAY_MIN_SECONDS",
    "DEFAULT_DELAY_MAX_SECONDS",
    "RESULTS_PER_PAGE",
    "EXTRA_PAGES",
    "DEFAULT_MAX_GENERATION_ROUNDS",
    "DEFAULT_MAX_PAGE_CHARS",
    "PROJECT_FILE_SUFFIX",
]
