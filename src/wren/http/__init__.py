"""HTTP value types — Request, Response, Headers, QueryParams, URL."""
