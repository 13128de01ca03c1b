import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from sqlalchemy import text
from starlette.datastructures import Headers

from mockapi.adapters.mock_gateway import GatewayValidationError, MockGatewayAdapter
from mockapi.config import Settings, settings as default_settings
from mockapi.db import init_db, make_engine, make_session_factory
from mockapi.repositories.inventory_repo import InventoryRepository
from mockapi.schemas.api_response import ApiResponse, error, respond
from mockapi.services.auth_service import AuthService
from mockapi.services.rate_limiter import RateLimiter
from mockapi.services.shipment_service import (
    ShipmentNotFound,
    ShipmentService,
    ShipmentValidationError,
)
from mockapi.services.webhook_service import WebhookEventLog
from mockapi.utils.clock import SystemClock
from mockapi.utils.log import get_logger

log = get_logger("mockapi.dispatch", "MOCK-API")

# Fixed status/body pairs, returned for any method.
CANNED_ERRORS = {
    "/error/400": (
        400,
        {"error": "Bad Request", "message": "Missing required field: 'orderId'", "code": "VALIDATION_ERROR"},
    ),
    "/error/403": (
        403,
        {"error": "Forbidden", "message": "You do not have permission to access this resource.", "code": "ACCESS_DENIED"},
    ),
    "/error/500": (
        500,
        {"error": "Internal Server Error", "message": "An unexpected condition was encountered.", "traceId": "err-992-abc"},
    ),
    "/error/502": (
        502,
        {"error": "Bad Gateway", "message": "The server encountered a temporary error and could not complete your request."},
    ),
}


@dataclass
class MockRequest:
    method: str
    path: str
    body: Any
    headers: Headers

    @property
    def resource_id(self) -> str:
        return self.path.rstrip("/").split("/")[-1]


@dataclass
class Route:
    name: str
    matches: Callable[[MockRequest], bool]
    handle: Callable[[MockRequest], ApiResponse]


def _to_headers(headers: Optional[Mapping]) -> Headers:
    """Case-insensitive view of the caller's headers. Raises UnicodeEncodeError for non latin-1 text."""
    if not headers or not isinstance(headers, Mapping):
        return Headers()
    raw = [
        (str(k).lower().encode("latin-1"), str(v).encode("latin-1"))
        for k, v in headers.items()
        if v is not None
    ]
    return Headers(raw=raw)


class MockApiService:
    """
    In-process stand-in for the shipping backend.

    Every call to `handle_request` sleeps for the configured latency, then
    walks `self.routes` in order and answers with the first route whose
    predicate matches. Later routes rely on earlier ones having already
    dealt with rate limiting, canned errors and auth. State (shipments,
    webhook log, rate window) belongs to this instance only.
    """

    def __init__(self, settings: Optional[Settings] = None, clock=None, gateway: Optional[MockGatewayAdapter] = None):
        self.settings = settings or default_settings
        self.clock = clock or SystemClock()

        self.engine = make_engine(self.settings.DATABASE_URL)
        self.session_factory = make_session_factory(self.engine)
        init_db(self.engine, self.session_factory)
        self.store_lock = threading.RLock()

        self.auth = AuthService(self.settings)
        self.webhooks = WebhookEventLog(self.settings.WEBHOOK_HISTORY_SIZE, clock=self.clock)
        self.rate_limiter = RateLimiter(
            self.settings.RATE_LIMIT_MAX_REQUESTS,
            self.settings.RATE_LIMIT_WINDOW_SECONDS,
            clock=self.clock,
        )
        self.gateway = gateway or MockGatewayAdapter(clock=self.clock)
        self.routes = self._build_routes()

    def _build_routes(self) -> List[Route]:
        s = self.settings
        return [
            Route("rate-limit", lambda r: s.RATE_LIMITED_PATH in r.path and not self.rate_limiter.check(), self._rate_limited),
            Route("canned-error", lambda r: r.path in CANNED_ERRORS, self._canned_error),
            Route("auth-apikey", lambda r: r.path == "/auth/apikey", lambda r: self.auth.check_api_key(r.headers)),
            Route("auth-apikey-pro", lambda r: r.path == "/auth/apikey/pro", lambda r: self.auth.check_pro_api_key(r.headers)),
            Route("auth-jwt", lambda r: r.path == "/auth/jwt", lambda r: self.auth.check_jwt(r.headers)),
            Route("proxy-payment", lambda r: r.path == "/proxy/payment" and r.method == "POST", self._proxy_payment),
            Route("webhook-trigger", lambda r: r.path == "/webhooks/trigger" and r.method == "POST", self._trigger_webhook),
            Route("webhook-history", lambda r: r.path == "/webhooks/history" and r.method == "GET", self._webhook_history),
            Route(
                "bearer-gate",
                lambda r: r.path.startswith(s.PROTECTED_PREFIX) and not self.auth.is_authenticated(r.headers),
                lambda r: error(401, "Unauthorized access"),
            ),
            Route("login", lambda r: r.path == "/auth/login" and r.method == "POST", lambda r: self.auth.login(r.body)),
            Route("shipments-list", lambda r: r.path == "/shipments" and r.method == "GET", self._list_shipments),
            Route("shipments-create", lambda r: r.path == "/shipments" and r.method == "POST", self._create_shipment),
            Route("shipments-get", lambda r: r.path.startswith("/shipments/") and r.method == "GET", self._get_shipment),
            Route(
                "shipments-update",
                lambda r: r.path.startswith("/shipments/") and r.method in ("PUT", "PATCH"),
                self._update_shipment,
            ),
            Route("shipments-delete", lambda r: r.path.startswith("/shipments/") and r.method == "DELETE", self._delete_shipment),
            Route("inventory-list", lambda r: r.path == "/inventory" and r.method == "GET", self._list_inventory),
            Route("limited-resource", lambda r: r.path == f"{s.RATE_LIMITED_PATH}/resource" and r.method == "GET", self._limited_resource),
        ]

    def handle_request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        headers: Optional[Mapping] = None,
    ) -> ApiResponse:
        """
        Answer one request description with {status, data, headers}.
        Never raises: unknown endpoints give 404, handler failures give 500.
        """
        self.clock.sleep(self.settings.LATENCY_MS / 1000.0)

        if not isinstance(endpoint, str):
            return error(400, "Bad Request", message="Endpoint must be a path string", code="MALFORMED_REQUEST")

        try:
            request = MockRequest(
                method=str(method or "GET").upper(),
                path=endpoint.split("?", 1)[0],
                body=body,
                headers=_to_headers(headers),
            )
        except UnicodeEncodeError:
            return error(400, "Bad Request", message="Header values must be latin-1 text", code="MALFORMED_REQUEST")

        try:
            for route in self.routes:
                if route.matches(request):
                    resp = route.handle(request)
                    log.info(f"{request.method} {request.path} -> {route.name} {resp.status}")
                    return resp
        except Exception as e:
            log.exception(f"{request.method} {request.path} failed")
            return error(500, "Internal Server Error", message=f"Unhandled {type(e).__name__} in mock engine")

        log.info(f"{request.method} {request.path} -> 404")
        return error(404, "Endpoint not found")

    def health(self) -> dict:
        db_ok = False
        try:
            with self.store_lock, self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                db_ok = True
        except Exception:
            log.exception("health: database check failed")
        return {
            "status": "ok" if db_ok and self.gateway.health_check() else "degraded",
            "db": db_ok,
            "gateway_adapter": self.gateway.health_check(),
            "webhook_events": len(self.webhooks),
            "rate_limit_remaining": self.rate_limiter.remaining(),
        }

    # --- handlers ---

    def _rate_limited(self, request: MockRequest) -> ApiResponse:
        retry_after = self.rate_limiter.retry_after()
        return respond(429, {"error": "Too Many Requests", "retryAfter": retry_after}, {"Retry-After": str(retry_after)})

    def _canned_error(self, request: MockRequest) -> ApiResponse:
        status, data = CANNED_ERRORS[request.path]
        return respond(status, dict(data))

    def _proxy_payment(self, request: MockRequest) -> ApiResponse:
        try:
            txn = self.gateway.charge(request.body)
        except GatewayValidationError as e:
            return error(400, "Missing payment details", code="VALIDATION_ERROR", field=str(e))
        return respond(200, txn, {"X-External-Service": self.gateway.service_header})

    def _trigger_webhook(self, request: MockRequest) -> ApiResponse:
        body = request.body if isinstance(request.body, dict) else {}
        event = self.webhooks.trigger(body.get("type"), body.get("payload"))
        return respond(202, {"message": "Webhook event queued", "eventId": event.id})

    def _webhook_history(self, request: MockRequest) -> ApiResponse:
        return respond(200, [e.model_dump() for e in self.webhooks.history()])

    def _list_shipments(self, request: MockRequest) -> ApiResponse:
        with self.session_factory() as db:
            items = [s.to_dict() for s in ShipmentService(db, self.store_lock).list()]
        return respond(200, items, {"X-Total-Count": str(len(items))})

    def _create_shipment(self, request: MockRequest) -> ApiResponse:
        with self.session_factory() as db:
            try:
                shipment = ShipmentService(db, self.store_lock).create(request.body)
            except ShipmentValidationError as e:
                return error(400, "Bad Request", message=str(e), code="VALIDATION_ERROR")
            log.info(f"created shipment {shipment.public_id}")
            return respond(201, shipment.to_dict())

    def _get_shipment(self, request: MockRequest) -> ApiResponse:
        with self.session_factory() as db:
            try:
                shipment = ShipmentService(db, self.store_lock).get(request.resource_id)
            except ShipmentNotFound as e:
                return error(404, str(e))
            return respond(200, shipment.to_dict())

    def _update_shipment(self, request: MockRequest) -> ApiResponse:
        with self.session_factory() as db:
            try:
                shipment = ShipmentService(db, self.store_lock).update(request.resource_id, request.body)
            except ShipmentNotFound as e:
                return error(404, str(e))
            except ShipmentValidationError as e:
                return error(400, "Bad Request", message=str(e), code="VALIDATION_ERROR")
            return respond(200, shipment.to_dict())

    def _delete_shipment(self, request: MockRequest) -> ApiResponse:
        with self.session_factory() as db:
            try:
                ShipmentService(db, self.store_lock).delete(request.resource_id)
            except ShipmentNotFound as e:
                return error(404, str(e))
        return respond(204, None)

    def _list_inventory(self, request: MockRequest) -> ApiResponse:
        with self.store_lock, self.session_factory() as db:
            items = [i.to_dict() for i in InventoryRepository(db).list()]
        return respond(200, items)

    def _limited_resource(self, request: MockRequest) -> ApiResponse:
        remaining = self.rate_limiter.remaining()
        return respond(
            200,
            {"status": "ok", "remaining": remaining},
            {
                "X-RateLimit-Limit": str(self.rate_limiter.max_requests),
                "X-RateLimit-Remaining": str(remaining),
            },
        )
