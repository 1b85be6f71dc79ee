# middleware/security_headers.py
import logging
import time
from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    """Adds hardening headers to every response and logs each request with its timing"""

    def __init__(self):
        self.security_headers = {
            'X-Content-Type-Options': 'nosniff',
            'X-Frame-Options': 'DENY',
            'X-XSS-Protection': '0',
            'Referrer-Policy': 'strict-origin-when-cross-origin',
            'Cross-Origin-Resource-Policy': 'same-site',
        }

    async def __call__(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error: {request.method} {request.url.path} -> {str(e)}")
            response = JSONResponse(status_code=500, content={'detail': 'Internal server error'})

        for header, value in self.security_headers.items():
            response.headers[header] = value

        processing_time = (time.time() - start_time) * 1000
        response.headers['X-Processing-Time-Ms'] = str(round(processing_time, 2))
        logger.info(f"{request.method} {request.url.path} {response.status_code} {processing_time:.1f}ms")

        return response
