"""Router modules composed by the bridge app factory."""
