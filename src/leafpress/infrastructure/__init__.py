"""Infrastructure layer — filesystem loading/writing and Jinja2 environments.

This layer depends on stdlib and third-party libs (ruamel.yaml, Jinja2).
The service layer bridges between domain models and infrastructure.
"""
