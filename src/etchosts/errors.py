class InvalidRecord(ValueError):
    """Raised for a record that cannot be written to a hosts file."""
