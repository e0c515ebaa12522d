from flask import Blueprint, current_app, send_from_directory

main_bp = Blueprint("main", __name__)


@main_bp.route("/<path:filename>", methods=["GET", "HEAD"])
def get_upload(filename: str):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
