"""GraphQL schema for the git-phrases API."""

import strawberry

from api.resolvers.status import Query

schema = strawberry.Schema(query=Query)
