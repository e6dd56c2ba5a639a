from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_PROMPT_LENGTH = 20000


class OutputMode(str, Enum):
    HTML = "html"
    PLAIN_TEXT = "plain_text"


class _CamelModel(BaseModel):
    # wire format is camelCase, python side stays snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateRequest(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    prompt: str = Field(max_length=MAX_PROMPT_LENGTH)
    model_name: Optional[str] = None
    output_mode: OutputMode = OutputMode.HTML
    provider_key: Optional[str] = None


class GenerateResponse(_CamelModel):
    provider: str
    model_used: str
    is_html: bool
    content: str


class ModelsResponse(_CamelModel):
    provider: str
    count: int
    models: List[str]


class ErrorResponse(BaseModel):
    error: str
