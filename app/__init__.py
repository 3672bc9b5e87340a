"""Gold Catalog API application package."""
