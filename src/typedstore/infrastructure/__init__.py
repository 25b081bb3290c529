"""Infrastructure layer - the SQLite document store and collection engine."""
