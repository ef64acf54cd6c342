"""HTTP transport, auth session and the explorer facade."""
