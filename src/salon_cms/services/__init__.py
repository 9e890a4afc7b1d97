"""Business logic — publishing, single-item menu edits, public pages."""
