"""Output adapters and the shared metrics context they report into."""
