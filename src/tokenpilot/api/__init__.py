"""TokenPilot HTTP API."""
