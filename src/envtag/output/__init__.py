"""Human and JSON rendering of bind reports."""
