"""Configuration: section models, settings resolution, discovery, logging."""
