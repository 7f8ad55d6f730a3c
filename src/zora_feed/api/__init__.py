"""HTTP API for the cached feeds."""
