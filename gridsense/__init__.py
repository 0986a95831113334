"""
gridsense - energy price ingest, forecast and decision service

Layer Structure:
- Domain: Readings, forecasts, decisions and the pure algorithms over them
- Application: Use cases, result fan-out and the stream ingest coordinator
- Infrastructure: Redis, MongoDB, Kafka and HTTP collaborator implementations
- Presentation: FastAPI routers
- Shared: Cross-cutting concerns (logging, constants, environment helpers)
- Main: Composition root, configuration and entry points
"""

__version__ = "1.0.0"
