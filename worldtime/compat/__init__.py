"""Options that change how time zone identifiers are interpreted."""
