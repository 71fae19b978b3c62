"""Infrastructure layer: reading documents and rules tables from disk.

This layer depends on stdlib and third-party parsers (ruamel.yaml).
It must never import from services, commands, or output.
"""
