class DraftStoreError(Exception):
    """Raised when a draft backup cannot be written or read."""
