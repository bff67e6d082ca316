"""Profile module - self-service account details and password change."""
