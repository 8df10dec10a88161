"""
Shared module for common utilities used by the order API.

STRUCTURE:
- shared.security: Identity and authentication
  - identity.py: Identity value object (id, role, region)
  - auth.py: JWT signing/verification, current_identity dependency
  - rate_limit.py: slowapi limiter for order mutations

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, transaction()
  - correlation.py: X-Request-ID middleware and logging filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, Regions, OrderStatus, PaymentType

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.security.auth import verify_jwt, current_identity
    from shared.infrastructure.db import get_db, transaction
    from shared.config.settings import settings
    from shared.config.constants import Roles, OrderStatus
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
