"""rethbuild — build the reth builder image and launch containerized builds."""

__version__ = "0.3.0"
