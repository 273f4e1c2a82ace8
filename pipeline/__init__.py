"""Pipeline orchestration, configuration, logging and error types."""
