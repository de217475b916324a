"""Cacti WMI poller adapter: wmic query builder and output flattener."""

__version__ = "0.1.0"
