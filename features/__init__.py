"""Feature handlers and media components for recap enhancer."""
