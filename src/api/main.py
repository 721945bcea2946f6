"""FastAPI application serving branch translation status over GraphQL.

Run with ``uvicorn api.main:app``.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from strawberry.fastapi import GraphQLRouter

from api.schema import schema
from common.env import env

API_NAME = "git-phrases API"
API_VERSION = "0.1.0"
GRAPHQL_PATH = "/graphql"
QUERIES = ("phrases", "status")


def create_app(cors_origins: list[str] | None = None) -> FastAPI:
    """Build the app with the GraphQL router and the info endpoints mounted.

    Args:
        cors_origins: Origins allowed to call the API; defaults to API_CORS_ORIGINS
    """
    app = FastAPI(
        title=API_NAME,
        description="Phrases extracted from git commits and the translation status of branches",
        version=API_VERSION,
    )

    # The API is read-only, so dashboards only ever need GET and POST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=env.api_cors_origins() if cors_origins is None else cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    app.include_router(GraphQLRouter(schema), prefix=GRAPHQL_PATH)

    @app.get("/")
    async def root():
        """Where to send GraphQL queries and which ones exist."""
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "graphql_endpoint": GRAPHQL_PATH,
            "queries": list(QUERIES),
            "docs": "/docs",
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()
