"""AWS Lambda entry point.

Mangum translates API Gateway HTTP API (v2) events into ASGI. Lifespan
runs on cold start so the chat backend is built once per container and
its bearer token is reused across warm invocations.
"""

from mangum import Mangum

from gigademo.main import app

handler = Mangum(app, lifespan="auto")
