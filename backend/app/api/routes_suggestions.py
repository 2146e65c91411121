from fastapi import APIRouter, Depends

from backend.app.api.schemas import ApiResponse, SuggestionsData
from backend.app.dependencies import Caller, get_caller, get_intervention_service
from backend.app.services.intervention_service import InterventionService

router = APIRouter()


@router.get("", response_model=ApiResponse[SuggestionsData])
def suggestions(
    caller: Caller = Depends(get_caller),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.suggestions(caller.user_id))
