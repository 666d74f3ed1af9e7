"""Data access: the note store and the theme preference store."""
