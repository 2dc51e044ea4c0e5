"""Constants shared across requeue modules."""
