"""Example route configuration and data used across tests and documentation."""

from .users import SAMPLE_CONFIG, SEED_STATEMENTS, build_sample_config, seed_database

__all__ = [
    "SAMPLE_CONFIG",
    "SEED_STATEMENTS",
    "build_sample_config",
    "seed_database",
]
