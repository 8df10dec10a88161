"""
Order API package.

Structure:
- main.py: FastAPI application
- core/: lifespan, CORS, middlewares
- routers/: HTTP endpoints (thin controllers)
- services/: permission strategies and domain services
- repositories/: data access
- models/: SQLAlchemy ORM models
- seed.py: development data
- cli.py: developer commands
"""
