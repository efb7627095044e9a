"""Tubely video service.

Uploaded videos are classified by orientation, rewritten for fast start
playback and published to object storage. The HTTP layer stays a thin facade
over the ingest service in :mod:`tubely.ingest`.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
