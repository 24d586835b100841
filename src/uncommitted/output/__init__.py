"""Report renderers — rich terminal and JSON."""
