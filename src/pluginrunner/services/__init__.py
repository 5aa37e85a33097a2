"""Service layer — the discovery/load/instantiate pipeline.

Services may import from domain, infrastructure, hooks, and config.
"""
