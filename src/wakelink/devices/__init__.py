"""Device catalog and its persistence backends."""
