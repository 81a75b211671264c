"""VOID: scream into the void and watch it fade."""
