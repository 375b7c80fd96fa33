"""Health e readiness."""
