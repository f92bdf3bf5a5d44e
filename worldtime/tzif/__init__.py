"""Library for reading time zone data from the IANA time zone database."""
