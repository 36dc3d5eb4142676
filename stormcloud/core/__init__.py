"""Core types and constants shared across blueprints."""
