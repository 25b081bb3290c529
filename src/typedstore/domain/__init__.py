"""Domain layer - document entities and store-independent collection logic."""
