"""Configuration package: YAML configuration with environment variable overrides."""
