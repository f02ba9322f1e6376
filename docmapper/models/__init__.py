"""ORM models backing the SQL document store."""
