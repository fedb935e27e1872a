"""Domain models and exceptions for the health checker."""
