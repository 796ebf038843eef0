"""HTTP surface for the index and search operations."""
