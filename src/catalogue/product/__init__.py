"""Product aggregate, registration and seed data."""
