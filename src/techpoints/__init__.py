"""Technician service-point tracking and payment front-end."""

__version__ = "0.3.0"
