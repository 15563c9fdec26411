"""Terminal previews of exported notebooks."""
