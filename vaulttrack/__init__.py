"""Top-level package for the VaultTrack expense tracker client.

Exposes the package version for runtime checks and CLI banners.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.0.0"
