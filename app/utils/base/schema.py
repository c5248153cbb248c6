from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body base: accepts camelCase keys from clients and snake_case from Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
