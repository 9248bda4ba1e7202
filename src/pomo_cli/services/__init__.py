"""Service layer: persistence, notifications and the interactive session."""
