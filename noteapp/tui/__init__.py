"""Terminal interface built on Textual."""
