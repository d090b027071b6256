"""Configuration and SQL builders for a bronze/silver telemetry pipeline."""

__version__ = "0.1.0"
__all__ = ["bronze", "config", "file", "records", "silver"]