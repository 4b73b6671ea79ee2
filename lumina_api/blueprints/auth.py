from flask import Blueprint, jsonify
from ..auth import login as check_credentials
from ..http import jerror, load_body
from ..schemas import LoginRequest

bp = Blueprint("auth", __name__)


@bp.post("/login")
def login():
    data = load_body(LoginRequest)
    granted = check_credentials(data.username, data.password)
    if granted is None:
        return jerror(401, "INVALID_CREDENTIALS", "Invalid credentials.")
    token, role = granted
    return jsonify(token=token, role=role)
