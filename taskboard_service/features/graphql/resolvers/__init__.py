"""Root Query, Mutation and Subscription resolvers."""

from taskboard_service.features.graphql.resolvers.mutations import Mutation
from taskboard_service.features.graphql.resolvers.queries import Query
from taskboard_service.features.graphql.resolvers.subscriptions import Subscription

__all__ = ["Mutation", "Query", "Subscription"]
