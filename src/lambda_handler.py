"""
Lambda Handler - serves GET / for the Prisma stack's HTTP API.
"""
import os
from datetime import datetime, timezone

from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import APIGatewayHttpResolver
from aws_lambda_powertools.logging import correlation_paths

logger = Logger(service=os.getenv("POWERTOOLS_SERVICE_NAME", "prisma-api"))
app = APIGatewayHttpResolver()


@app.get("/")
def root():
    """Greeting with the request time; reports whether a database is wired up."""
    now = datetime.now(timezone.utc).isoformat()
    return {
        "message": f"Hello, World! Your request was received at {now}.",
        "database_configured": bool(os.getenv("DATABASE_URL")),
    }


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_HTTP)
def handler(event, context):
    return app.resolve(event, context)
