"""gorel: release and install tooling for cross-compiled CLI binaries."""

__version__ = "0.3.0"
