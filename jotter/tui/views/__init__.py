"""Entity adapters for the data browser."""
