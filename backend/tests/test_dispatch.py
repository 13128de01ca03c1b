import pytest
from sqlalchemy.pool import StaticPool

from mockapi.adapters.mock_gateway import GatewayValidationError, MockGatewayAdapter
from mockapi.config import Settings
from mockapi.db import make_engine
from mockapi.schemas.api_response import error
from mockapi.services.mock_api_service import MockApiService


def test_latency_applied_to_every_request(api, clock):
    api.handle_request("GET", "/shipments")
    api.handle_request("GET", "/does-not-exist")
    api.handle_request("GET", None)
    assert clock.slept == [0.3, 0.3, 0.3]


@pytest.mark.parametrize(
    "path,status,field,value",
    [
        ("/error/400", 400, "code", "VALIDATION_ERROR"),
        ("/error/403", 403, "code", "ACCESS_DENIED"),
        ("/error/500", 500, "traceId", "err-992-abc"),
        ("/error/502", 502, "error", "Bad Gateway"),
    ],
)
@pytest.mark.parametrize("method", ["GET", "POST", "DELETE"])
def test_canned_errors_any_method(api, path, status, field, value, method):
    res = api.handle_request(method, path, {"anything": 1}, {"Authorization": "Bearer valid-token-123"})
    assert res.status == status
    assert res.data[field] == value


def test_canned_error_payload_is_not_shared(api):
    api.handle_request("GET", "/error/400").data["code"] = "MUTATED"
    assert api.handle_request("GET", "/error/400").data["code"] == "VALIDATION_ERROR"


def test_rate_limit_precedes_everything(clock):
    api = MockApiService(settings=Settings(LATENCY_MS=0, RATE_LIMIT_MAX_REQUESTS=1), clock=clock)
    # admitted: the bearer gate answers
    assert api.handle_request("GET", "/secure/limited").status == 401
    # throttled before auth is even looked at
    assert api.handle_request("GET", "/secure/limited").status == 429


def test_proxy_payment_success(api):
    res = api.handle_request("POST", "/proxy/payment", {"amount": 4999, "currency": "USD"})
    assert res.status == 200
    assert res.data["transactionId"].startswith("txn_")
    assert len(res.data["transactionId"]) == len("txn_") + 9
    assert res.data["status"] == "succeeded"
    assert res.data["gateway"] == "mock_stripe_v3"
    assert res.data["captured"] is True
    assert res.headers["X-External-Service"] == "Stripe-Mock"

    again = api.handle_request("POST", "/proxy/payment", {"amount": 1, "currency": "EUR"})
    assert again.data["transactionId"] != res.data["transactionId"]


@pytest.mark.parametrize(
    "body",
    [None, {}, {"amount": 10}, {"currency": "USD"}, {"amount": 0, "currency": "USD"}, {"amount": "10", "currency": "USD"}, {"amount": 10, "currency": ""}],
)
def test_proxy_payment_missing_details(api, body):
    res = api.handle_request("POST", "/proxy/payment", body)
    assert res.status == 400
    assert res.data["error"] == "Missing payment details"
    assert res.data["code"] == "VALIDATION_ERROR"


def test_proxy_payment_requires_post(api):
    assert api.handle_request("GET", "/proxy/payment").status == 404


def test_gateway_adapter(clock):
    gw = MockGatewayAdapter(delay_ms=150, clock=clock)
    assert gw.charge({"amount": 2.5, "currency": "GBP"})["captured"] is True
    assert clock.slept == [0.15]
    with pytest.raises(GatewayValidationError):
        gw.charge({"amount": True, "currency": "GBP"})


def test_unknown_endpoint(api):
    res = api.handle_request("GET", "/nope")
    assert res.status == 404
    assert res.data == {"error": "Endpoint not found"}
    assert res.headers == {}


@pytest.mark.parametrize("endpoint", [None, 42, {"path": "/shipments"}])
def test_malformed_endpoint_never_raises(api, endpoint):
    res = api.handle_request("GET", endpoint)
    assert res.status == 400
    assert res.data["code"] == "MALFORMED_REQUEST"


def test_path_matching_is_exact_and_case_sensitive(api):
    assert api.handle_request("GET", "/Shipments").status == 404
    assert api.handle_request("GET", "shipments").status == 404
    assert api.handle_request("GET", "/shipments?page=2").status == 200


def test_method_is_case_insensitive(api):
    assert api.handle_request("get", "/shipments").status == 200


def test_non_latin1_header_is_malformed(api):
    res = api.handle_request("GET", "/auth/apikey", headers={"x-api-key": "ключ"})
    assert res.status == 400
    assert res.data["code"] == "MALFORMED_REQUEST"


def test_handler_failure_becomes_500(api, monkeypatch):
    def boom(request):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(api.routes[-1], "handle", boom)
    res = api.handle_request("GET", "/limited/resource")
    assert res.status == 500
    assert res.data["error"] == "Internal Server Error"


def test_instances_are_isolated(test_settings, clock):
    a = MockApiService(settings=test_settings, clock=clock)
    b = MockApiService(settings=test_settings, clock=clock)
    sid = a.handle_request("POST", "/shipments", {"origin": "X", "destination": "Y"}).data["id"]
    a.handle_request("POST", "/webhooks/trigger")

    assert sid not in [s["id"] for s in b.handle_request("GET", "/shipments").data]
    assert b.handle_request("GET", "/webhooks/history").data == []


def test_response_shape(api):
    dumped = api.handle_request("GET", "/inventory").model_dump()
    assert set(dumped) == {"status", "data", "headers"}


def test_health(api):
    h = api.health()
    assert h["status"] == "ok"
    assert h["db"] is True
    assert h["webhook_events"] == 0


def test_error_body_carries_message_and_code():
    res = error(403, "Forbidden", message="Invalid X-API-Key", code="ACCESS_DENIED")
    assert res.status == 403
    assert res.data == {"error": "Forbidden", "message": "Invalid X-API-Key", "code": "ACCESS_DENIED"}


def test_memory_databases_are_isolated_file_databases_are_shared(tmp_path):
    assert isinstance(make_engine("sqlite://").pool, StaticPool)
    url = f"sqlite:///{tmp_path / 'mock.db'}"
    assert not isinstance(make_engine(url).pool, StaticPool)
