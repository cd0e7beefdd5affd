"""Feature modules (models, schemas, repositories, routers)."""
