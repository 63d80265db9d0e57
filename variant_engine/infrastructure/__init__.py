"""Infrastructure layer - configuration."""
