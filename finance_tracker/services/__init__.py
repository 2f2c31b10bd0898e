"""Services coordinating repositories and calculation engines."""
