"""Order desk backend: customers, routes and daily delivery orders."""
