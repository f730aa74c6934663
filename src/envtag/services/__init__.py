"""Service layer — conversion registry, record walking, and binding.

Services may import from the domain layer.
They must never import from config, output, or commands.
"""
