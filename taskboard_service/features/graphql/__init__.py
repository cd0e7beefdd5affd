"""GraphQL API: schema, request context and per-request loaders."""
