class StorageError(Exception):
    """The device database could not answer a query."""
