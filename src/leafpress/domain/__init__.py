"""Domain layer — content items, slug index, collections, and errors.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, rendering, commands, or config.
"""
