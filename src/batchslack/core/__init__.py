"""Core engine.

Pure functions and read-only structures: lead time index, route grouping and
slack computation. Nothing in this package performs I/O.
"""
