"""Service layer: operations returning ServiceResult.

Services may import from domain, validation, plugins and infrastructure.
They must never import from commands or output.
"""
