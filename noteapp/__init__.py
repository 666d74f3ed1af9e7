"""
Note App.

- backend/: Configuration, storage, live queries, services and view-models
- tui/: Terminal interface (Textual + Rich)
"""
