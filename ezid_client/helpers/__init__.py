"""Helper modules for logging and the ANVL wire format."""
