from typing import Any, Optional

from starlette.datastructures import Headers

from mockapi.config import Settings, settings as default_settings
from mockapi.schemas.api_response import ApiResponse, error, respond

BEARER_PREFIX = "Bearer "


class AuthService:
    """
    Illustrative credential checks. Nothing here is cryptographically sound:
    keys are compared verbatim and JWTs are only checked for shape.
    """

    def __init__(self, settings: Optional[Settings] = None):
        cfg = settings or default_settings
        self.issued_tokens = tuple(cfg.VALID_TOKENS)
        self.tokens = frozenset(self.issued_tokens)
        self.sandbox_key = cfg.SANDBOX_API_KEY
        self.pro_key = cfg.PRO_API_KEY
        self.username = cfg.LOGIN_USERNAME
        self.password = cfg.LOGIN_PASSWORD
        self.token_expires_at = cfg.TOKEN_EXPIRES_AT

    def check_api_key(self, headers: Headers) -> ApiResponse:
        api_key = headers.get("x-api-key")
        if api_key is None:
            return error(403, "Forbidden", message="Missing X-API-Key header")
        if api_key != self.sandbox_key:
            return error(403, "Forbidden", message="Invalid X-API-Key")
        return respond(200, {"status": "Authenticated", "access": "full", "scope": ["read", "write"]})

    def check_pro_api_key(self, headers: Headers) -> ApiResponse:
        api_key = headers.get("x-api-key")
        if api_key is None:
            return error(403, "Forbidden", message="Missing X-API-Key header for pro tier")
        if api_key != self.pro_key:
            return error(403, "Forbidden", message="Invalid pro tier API key")
        return respond(
            200,
            {
                "status": "Authenticated",
                "tier": "pro",
                "scope": ["read", "write", "admin"],
                "data": {"report": "quarterly-freight-forecast", "classification": "confidential"},
            },
            {"X-Auth-Tier": "pro"},
        )

    def check_jwt(self, headers: Headers) -> ApiResponse:
        auth_header = headers.get("authorization", "")
        if auth_header.startswith(BEARER_PREFIX):
            segments = auth_header[len(BEARER_PREFIX):].split(".")
            if len(segments) == 3 and all(segments):
                return respond(200, {"status": "Success", "user": "qa-test-bot", "role": "admin"})
        return error(401, "Unauthorized", message="Bearer token malformed or expired")

    def bearer_token(self, headers: Headers) -> str:
        auth_header = headers.get("authorization", "")
        if auth_header.startswith(BEARER_PREFIX):
            return auth_header[len(BEARER_PREFIX):]
        return auth_header

    def is_authenticated(self, headers: Headers) -> bool:
        return self.bearer_token(headers) in self.tokens

    def login(self, body: Any) -> ApiResponse:
        body = body if isinstance(body, dict) else {}
        if body.get("username") == self.username and body.get("password") == self.password:
            token = self.issued_tokens[0] if self.issued_tokens else None
            return respond(200, {"token": token, "expiresAt": self.token_expires_at})
        return error(403, "Invalid credentials")
