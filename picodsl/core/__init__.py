"""picodsl core: data model, topology graph, errors and utilities."""
