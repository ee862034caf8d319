"""Task records, loading and model validation."""
