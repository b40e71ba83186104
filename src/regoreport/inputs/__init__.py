"""Running ``opa test`` and reading what it prints."""
