"""HTTP gateway — FastAPI app exposing the movies graph."""
