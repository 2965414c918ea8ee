from fastapi import APIRouter

from .models import Role, ROLE_LABELS
from .schemas import RoleSchema

jobrole_router = APIRouter(prefix="/roles", tags=["Roles"])

# List the fixed role catalogue
@jobrole_router.get("", response_model=list[RoleSchema])
def list_roles():
    return [RoleSchema(code=r, label=ROLE_LABELS[r]) for r in Role]
