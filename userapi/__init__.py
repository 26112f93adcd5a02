"""users-crud-api: create/read/update over a single `users` table."""

__version__ = "0.1.0"
