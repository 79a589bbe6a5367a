"""HTTP front-end for the castle engine: FastAPI app and a requests client."""
