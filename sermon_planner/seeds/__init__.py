"""Sample data for development databases."""

from sermon_planner.seeds.loader import load_sample_data
from sermon_planner.seeds.seeder import clear_tables, seed_sample_data

__all__ = ["clear_tables", "load_sample_data", "seed_sample_data"]
