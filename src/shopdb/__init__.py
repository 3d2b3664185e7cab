"""shopdb - products schema and migration runner."""

__version__ = "0.1.0"
