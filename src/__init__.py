"""Media search gateway: TMDB passthrough, embeddings and vector search."""

__version__ = "0.1.0"
