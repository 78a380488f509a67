from flask import Blueprint, jsonify, request

from pdfhub.api.responses import success
from pdfhub.api.schemas import (
    ChangePasswordRequest,
    FederatedLoginRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    parse_request,
)
from pdfhub.api.security import auth_required, current_account, get_services
bp = Blueprint("auth", __name__, url_prefix="/auth")


@bp.post("/register")
def register():
    body = parse_request(RegisterRequest, request.get_json(silent=True))
    result = get_services().identity.register(body.full_name, body.email, body.password)
    return jsonify(result.to_response()), 201


@bp.post("/login")
def login():
    body = parse_request(LoginRequest, request.get_json(silent=True))
    result = get_services().identity.authenticate(body.email, body.password)
    return jsonify(result.to_response()), 200


@bp.get("/profile")
@auth_required
def get_profile():
    account = current_account()
    usage = get_services().quota.summary(account)
    return success({**account.to_public_dict(), "storageUsed": usage.used, "storageLimit": usage.limit})


@bp.put("/profile")
@auth_required
def update_profile():
    body = parse_request(UpdateProfileRequest, request.get_json(silent=True))
    account = get_services().identity.update_profile(current_account(), body.full_name)
    return success(account.to_public_dict())


@bp.put("/change-password")
@auth_required
def change_password():
    body = parse_request(ChangePasswordRequest, request.get_json(silent=True))
    get_services().identity.change_password(
        current_account(), body.current_password, body.new_password
    )
    return success(message="Password updated successfully")


@bp.post("/forgot-password")
def forgot_password():
    body = parse_request(ForgotPasswordRequest, request.get_json(silent=True))
    get_services().identity.begin_password_reset(body.email)
    return success(message="Password reset email sent")


@bp.post("/reset-password")
def reset_password():
    body = parse_request(ResetPasswordRequest, request.get_json(silent=True))
    get_services().identity.complete_password_reset(body.token, body.password)
    return success(message="Password reset successfully")


@bp.post("/<provider>")
def federated_login(provider: str):
    body = parse_request(FederatedLoginRequest, request.get_json(silent=True))
    result = get_services().identity.federated_login(provider.lower(), body.assertion)
    return jsonify(result.to_response()), 200
