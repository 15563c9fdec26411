"""Writing of exported notebooks."""
