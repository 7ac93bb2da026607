"""Invoice financial-aggregation engine."""
