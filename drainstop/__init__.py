"""drainstop: graceful shutdown for network-serving processes."""

__version__ = "0.1.0"
