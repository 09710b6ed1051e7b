"""Telangana State Dental Council registration and NOC portal backend."""

__version__ = "1.0.0"
