"""Content gateway web entrypoint."""
