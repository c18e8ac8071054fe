"""Query adapters shipped with the package."""
