"""Runtime bookkeeping."""

from cfbtrends.runtime.manifest import RunManifest

__all__ = ["RunManifest"]
