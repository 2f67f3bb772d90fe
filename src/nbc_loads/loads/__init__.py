"""Load engines: pure, synchronous formula cascades."""
