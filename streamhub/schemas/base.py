from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from streamhub.utils.clock import ensure_aware

# JSON bodies are camelCase on the wire, snake_case in Python
UtcDatetime = Annotated[datetime, AfterValidator(ensure_aware)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    """Incoming bodies reject fields they don't declare."""
    model_config = ConfigDict(extra="forbid")


class MessageResponse(CamelModel):
    message: str
