"""Base layer: models, interfaces, errors, logging and cancellation primitives."""
