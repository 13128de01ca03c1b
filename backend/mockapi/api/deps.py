from fastapi import Request

from mockapi.services.mock_api_service import MockApiService


def get_mock_api(request: Request) -> MockApiService:
    return request.app.state.mock_api
