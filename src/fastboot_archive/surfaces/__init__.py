"""User-facing surfaces built on top of the core pipeline."""
