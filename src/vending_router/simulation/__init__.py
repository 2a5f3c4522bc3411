"""Demo driver: random event generation and fleet wiring."""
