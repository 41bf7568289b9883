"""Use-case layer for the verification workflows.

Each module validates caller input and delegates to ports without performing
transport I/O directly.
"""
