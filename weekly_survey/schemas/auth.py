from pydantic import Field

from weekly_survey.schemas.common import CamelModel, UserOut


class RegisterIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    id_number: str = Field(..., min_length=1, max_length=50)
    password: str


class LoginIn(CamelModel):
    id_number: str
    password: str


class TokenOut(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
