"""Infrastructure layer — filesystem discovery and code loading."""
