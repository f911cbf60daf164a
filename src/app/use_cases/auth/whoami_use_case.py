from libs.result import Result, Return
from src.api.utils.operator_metadata import OperatorMetadata
from .dtos import WhoAmIResponse


class WhoAmIUseCase:
    """Identity of the operator, straight from the propagated metadata"""

    async def execute(self, operator: OperatorMetadata) -> Result[WhoAmIResponse]:
        return Return.ok(
            WhoAmIResponse(user_id=operator.user_id, username=operator.username)
        )
