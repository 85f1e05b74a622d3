"""Developer environment setup driven by a hierarchical config file."""
