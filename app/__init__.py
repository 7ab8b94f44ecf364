"""HTTP service for generating and exporting jigsaw puzzles."""
