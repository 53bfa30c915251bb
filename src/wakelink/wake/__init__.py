"""Wake command dispatch."""
