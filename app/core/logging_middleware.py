import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - start
        # set by get_current_user for routes that resolve an identity
        identity = getattr(request.state, "identity", None)
        logger.info(
            "%s %s -> %s (%.2fs) user=%s role=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration,
            identity.user_id if identity else "-",
            identity.role if identity else "-",
        )

        return response
