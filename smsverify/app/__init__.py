"""Composition layer: wires config, transport, metrics and adapters."""
