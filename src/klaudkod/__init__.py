"""klaudkod — terminal client for a streaming assistant backend."""

__version__ = "0.1.0"
