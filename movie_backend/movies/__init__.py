"""Movie resource: validation, poster files and SQL access."""
