"""Device capability catalog and channel type definition toolkit."""
