"""Rendering layer — filters, component registry, markdown, and page rendering."""
