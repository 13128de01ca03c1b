import json

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool

from mockapi.api.deps import get_mock_api
from mockapi.schemas.api_response import ApiResponse
from mockapi.schemas.playground_schema import PlaygroundRequest
from mockapi.services.mock_api_service import MockApiService

router = APIRouter(tags=["playground"])

# transport headers that describe the HTTP hop, not the mocked request
HOP_HEADERS = {"host", "content-length", "connection", "accept-encoding", "user-agent"}


@router.post("/api/playground", summary="Run a request description through the mock engine", response_model=ApiResponse)
def run_playground(payload: PlaygroundRequest, mock_api: MockApiService = Depends(get_mock_api)):
    """
    payload: { "method": "POST", "endpoint": "/shipments", "body": {...}, "headers": {...} }
    returns the engine's { status, data, headers } as the response body
    """
    return mock_api.handle_request(payload.method, payload.endpoint, payload.body, payload.headers)


@router.api_route(
    "/mock/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    summary="Forward a real HTTP request to the mock engine",
)
async def forward(path: str, request: Request, mock_api: MockApiService = Depends(get_mock_api)):
    raw = await request.body()
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        return Response(
            content=json.dumps({"error": "Bad Request", "message": "Body is not valid JSON", "code": "MALFORMED_REQUEST"}),
            status_code=400,
            media_type="application/json",
        )
    headers = {k: v for k, v in request.headers.items() if k not in HOP_HEADERS}
    # the engine sleeps for its latency, keep that off the event loop
    result = await run_in_threadpool(mock_api.handle_request, request.method, f"/{path}", body, headers)
    if result.status == 204:
        return Response(status_code=204, headers=result.headers)
    return Response(
        content=json.dumps(result.data),
        status_code=result.status,
        headers=result.headers,
        media_type="application/json",
    )
