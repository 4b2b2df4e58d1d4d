from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class UserAuth(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str

class RefreshTokenRequest(CamelModel):
    access_token: str
    refresh_token: str
