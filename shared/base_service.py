"""
Base service class for the Game Platform Gateway.
"""

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, List, Optional
import time

from shared.config import ServiceConfig, get_config
from shared.logging import clear_context, configure_logging, get_logger, set_request_id
from shared.metrics import get_metrics_collector
from shared.errors import (
    ErrorResponse,
    NotFoundError,
    PlatformApiException,
    SuccessResponse,
    ValidationError,
    utc_timestamp,
)


SERVICE_VERSION = "1.0.0"

# Hardening headers applied to every response
SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class BaseService:
    """Base service class with common functionality.

    Subclasses add their own inner middleware in ``_setup_service_middleware``
    and routes after calling ``super().__init__``.
    """

    # Friendlier messages for specific request fields, keyed by parameter name
    validation_messages: Dict[str, str] = {}

    def __init__(self, service_name: str, config: Optional[ServiceConfig] = None):
        self.service_name = service_name
        self.config = config or get_config(service_name)
        self.logger = get_logger(f"{service_name}.service")
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.monotonic()

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description="Game Platform Gateway - normalized game platform data",
            version=SERVICE_VERSION,
            docs_url="/docs" if self.config.is_development else None,
            redoc_url="/redoc" if self.config.is_development else None,
            openapi_url="/openapi.json" if self.config.is_development else None,
        )

    def _setup_service_middleware(self):
        """Hook for middleware that must run inside CORS and request logging."""

    def _setup_middleware(self):
        """Set up middleware.

        Starlette runs the most recently added middleware first, so service
        middleware goes in before the shared outer layers.
        """
        self._setup_service_middleware()

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def request_context(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            start_time = time.perf_counter()
            try:
                response = await call_next(request)

                duration = time.perf_counter() - start_time
                route = request.scope.get("route")
                endpoint = getattr(route, "path", "unmatched")

                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=endpoint,
                    status_code=response.status_code,
                    duration=duration
                )

                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration * 1000, 2)
                )

                for header, value in SECURITY_HEADERS.items():
                    response.headers.setdefault(header, value)
                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                clear_context()

    def _setup_routes(self):
        """Set up common routes and error handlers."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return self.send_response(
                {
                    "status": "OK",
                    "uptime": self._get_uptime(),
                    "timestamp": utc_timestamp(),
                    "version": SERVICE_VERSION,
                },
                "API is healthy",
            )

        @self.app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            return Response(
                content=self.metrics.render(),
                media_type=CONTENT_TYPE_LATEST
            )

        @self.app.exception_handler(PlatformApiException)
        async def platform_exception_handler(request: Request, exc: PlatformApiException):
            """Render PlatformApiException into the error envelope."""
            self.logger.warning(
                "Request rejected",
                code=exc.code,
                message=exc.message,
                path=request.url.path,
            )
            self.metrics.record_error(exc.code)
            return self._error_json(exc.status_code, exc.to_response())

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            """Render request validation failures as VALIDATION_ERROR."""
            details = self._format_validation_errors(exc.errors())
            self.metrics.record_error("VALIDATION_ERROR")
            return self._error_json(400, ValidationError(details=details).to_response())

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            """Unknown routes answer with the list of available endpoints."""
            if exc.status_code in (404, 405):
                error = NotFoundError(details={"availableEndpoints": self.available_endpoints()})
                return self._error_json(404, error.to_response())
            return self.send_error(exc.status_code, str(exc.detail), "HTTP_ERROR")

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            self.metrics.record_error("INTERNAL_ERROR")
            return self.send_error(
                500,
                "Internal server error",
                "INTERNAL_ERROR",
                str(exc) if self.config.is_development else None,
            )

    def _format_validation_errors(self, errors) -> List[Dict[str, Any]]:
        details = []
        for error in errors:
            location = error.get("loc", ())
            field = ".".join(str(part) for part in location[1:])
            details.append({
                "location": location[0] if location else None,
                "field": field,
                "message": self.validation_messages.get(field, error.get("msg")),
                "value": error.get("input"),
            })
        return jsonable_encoder(details)

    def available_endpoints(self) -> List[str]:
        """Endpoints advertised in 404 responses. Override in subclasses."""
        return ["GET /health", "GET /metrics"]

    def send_response(
        self,
        data: Any,
        message: str = "Success",
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """Wrap ``data`` in the success envelope."""
        envelope = SuccessResponse(message=message, data=data, timestamp=utc_timestamp())
        return JSONResponse(content=jsonable_encoder(envelope.model_dump()), headers=headers)

    def send_error(self, status_code: int, message: str, code: str = "UNKNOWN_ERROR", details: Any = None) -> JSONResponse:
        """Wrap an error in the error envelope."""
        envelope = ErrorResponse(error=message, code=code, details=details, timestamp=utc_timestamp())
        return self._error_json(status_code, envelope)

    @staticmethod
    def _error_json(status_code: int, envelope: ErrorResponse) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope.model_dump()))

    def _get_uptime(self) -> float:
        """Get service uptime in seconds."""
        return time.monotonic() - self._start_time

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
