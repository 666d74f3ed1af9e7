"""Backend: everything below the presentation layer."""
