from flask import Blueprint

from pdfhub.api.responses import success
from pdfhub.api.schemas import parse_id
from pdfhub.api.security import auth_required, get_services, role_required
from pdfhub.database.models import ROLE_ADMIN

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.post("/accounts/<account_id>/deactivate")
@auth_required
@role_required(ROLE_ADMIN)
def deactivate_account(account_id: str):
    account = get_services().identity.deactivate(parse_id(account_id, "User not found"))
    return success(account.to_public_dict())


@bp.post("/sweep")
@auth_required
@role_required(ROLE_ADMIN)
def sweep_expired():
    removed = get_services().sweeper.sweep_once()
    return success({"removed": removed})
