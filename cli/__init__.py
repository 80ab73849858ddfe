"""Terminal client for the radiation monitor relay."""
