"""Subprocess wrappers for the container engine and the build-runner."""
