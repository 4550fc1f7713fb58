"""Weekly workout planner API."""
