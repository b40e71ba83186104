"""JSON schemas for raw ``opa test`` output."""
