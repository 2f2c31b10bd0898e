"""HTTP blueprints for the finance tracker API."""
