"""Admin roles. Viewers can read content; editors and admins can also save it."""

ADMIN = "admin"
EDITOR = "editor"
VIEWER = "viewer"

CONTENT_EDITOR_ROLES = (ADMIN, EDITOR)
