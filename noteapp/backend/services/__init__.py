"""Services mediating between view-models and the stores."""
