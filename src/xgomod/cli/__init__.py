"""xgomod command line interface."""
