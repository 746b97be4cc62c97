"""Request building, transport and response dispatch."""
