"""Domain services: lifecycle rules and permission checks live here."""
