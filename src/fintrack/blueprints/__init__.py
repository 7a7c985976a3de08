"""Blueprint packages for the FinTrack JSON API."""
