"""Static battle reference data."""
