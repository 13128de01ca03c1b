from fastapi import APIRouter, Depends

from mockapi.api.deps import get_mock_api
from mockapi.services.mock_api_service import MockApiService

router = APIRouter()


@router.get("/health", tags=["health"])
def health(mock_api: MockApiService = Depends(get_mock_api)):
    return mock_api.health()
