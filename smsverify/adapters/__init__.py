"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of the domain ports: the provider REST adapter,
    its ``requests`` transport, an in-memory metrics sink and an offline
    verification double.

Call context:
    Imported by the composition root (``smsverify/app/main.py``) and by tests.
"""
