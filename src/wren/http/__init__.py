"""HTTP value types — Request, Response and Headers."""
