"""Users feature: registration, login and profile."""
