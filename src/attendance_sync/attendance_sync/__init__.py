"""Attendance Sync package.

This package is organized by feature modules (events, reconciliation, devices,
sync, ...) with a thin Flask controller layer over service/repository layers.
"""
