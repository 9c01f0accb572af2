"""Process-level helpers shared by the import and projection layers."""
