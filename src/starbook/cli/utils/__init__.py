"""CLI helpers: console output, shared state and screen views."""
