"""Configuration for MPN MCP server."""

import os

# Server settings
HTTP_PORT = int(os.getenv("HTTP_PORT", "8080"))
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Classification limits
MAX_MPN_LENGTH = int(os.getenv("MAX_MPN_LENGTH", "64"))  # Longer inputs are never part numbers
MAX_BATCH_SIZE = int(os.getenv("MAX_BATCH_SIZE", "50"))  # Max MPNs per classify_parts call
