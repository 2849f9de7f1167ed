"""Data access helpers: read table exports and map rows onto engine records."""
