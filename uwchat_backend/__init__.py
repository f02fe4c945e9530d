"""Campus chat assistant backend."""
