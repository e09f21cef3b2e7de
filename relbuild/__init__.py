"""Hermetic release builds: compile, tarball, .deb and .rpm."""

__version__ = "0.1.0"
