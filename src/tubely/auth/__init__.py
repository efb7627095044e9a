"""Bearer token authentication."""
