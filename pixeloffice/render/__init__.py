"""Terminal rendering for office frames."""
