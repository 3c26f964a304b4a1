"""Flask JSON API consumed by the dashboard front end."""
