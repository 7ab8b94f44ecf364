"""Services for puzzle layout, export and image handling."""
