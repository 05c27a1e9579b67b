"""Rebuild index maintenance records from IndexOptimize text logs."""

__version__ = "0.1.0"
