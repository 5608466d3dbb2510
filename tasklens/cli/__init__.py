"""tasklens command-line interface."""
