"""GraphQL schema assembly.

Combines the Query, Mutation and Subscription root types into a single schema.
"""

from __future__ import annotations

import logging

import strawberry

from taskboard_service.features.graphql.resolvers import Mutation, Query, Subscription

logger = logging.getLogger(__name__)

schema = strawberry.Schema(query=Query, mutation=Mutation, subscription=Subscription)

logger.debug("GraphQL schema created")

__all__ = ["schema"]
