from mockapi.schemas.api_response import ApiResponse
from mockapi.services.mock_api_service import MockApiService

__all__ = ["ApiResponse", "MockApiService"]
