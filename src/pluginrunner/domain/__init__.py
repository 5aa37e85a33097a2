"""Domain layer — plugin descriptors, base-type policy, events, and errors.

This layer depends only on stdlib, pydantic, and the code loader in
:mod:`pluginrunner.infrastructure.loader`.
It must never import from services, hooks, or config.
"""
