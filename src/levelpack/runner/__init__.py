"""Dataset generation and experiment running."""
