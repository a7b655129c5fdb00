"""Record store providers."""
