"""Domain layer: the expression language, value kinds, and error model.

This layer depends only on stdlib.
It must never import from validation, services, infrastructure, commands, or config.
"""
