from flask import Blueprint

home_bp = Blueprint("home", __name__)

WELCOME = "Welcome to the todo comments backend"


@home_bp.route("/", methods=["GET"])
def index():
    return WELCOME
