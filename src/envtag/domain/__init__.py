"""Domain layer — kinds, durations, directives, and errors.

This layer depends only on stdlib and pydantic.
It must never import from services, config, output, or commands.
"""
