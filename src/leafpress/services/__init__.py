"""Service layer — build orchestration returning ServiceResult.

Services may import from domain, infrastructure, and rendering layers.
They must never import from commands or output.
"""
