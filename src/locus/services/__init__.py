"""Services around the outline engine: files, persistence and the editing store."""
