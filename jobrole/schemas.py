from pydantic import BaseModel, ConfigDict
from .models import Role


class RoleSchema(BaseModel):
    code: Role
    label: str
    model_config = ConfigDict(from_attributes=True)
