from pydantic import BaseModel, ConfigDict, Field


class UserCredentials(BaseModel):
    login: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auth_token: str = Field(..., alias="authToken")
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    id: int
    login: str
