"""Domain layer: analysis models, units and aggregation."""
