"""Answer resolution and profile completion scoring."""
