from pydantic import BaseModel, ConfigDict, Field

# Wire names keep the capitalised keys existing clients send.
_strict = ConfigDict(extra="forbid", populate_by_name=True)

class EmailQuery(BaseModel):
    model_config = _strict

    email: str = Field(alias="Email", min_length=1)

class CodeQuery(BaseModel):
    model_config = _strict

    email: str = Field(alias="Email", min_length=1)
    code: str = Field(alias="Code", min_length=1)

class LoginIn(BaseModel):
    model_config = _strict

    email: str = Field(alias="Email")
    password: str = Field(alias="Password")

class RegisterIn(BaseModel):
    model_config = _strict

    email: str = Field(alias="Email")
    name: str = Field(alias="Name")
    password: str = Field(alias="Password")
    code: str = Field(alias="Code")

class RecoveryIn(BaseModel):
    model_config = _strict

    email: str = Field(alias="Email")
    code: str = Field(alias="Code")
    password: str = Field(alias="Password")
