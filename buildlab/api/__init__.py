"""HTTP surface of the generation service."""
