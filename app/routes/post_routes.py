import logging

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError

from app.services.asset_sink import AssetStorageError
from app.services.post_service import (
    PostNotFoundError,
    get_posts,
    like_post,
    upload_post,
)

logger = logging.getLogger(__name__)

post_bp = Blueprint("posts", __name__)


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    try:
        return jsonify(get_posts()), 200
    except SQLAlchemyError:
        logger.exception("Error fetching posts")
        return jsonify({"error": "Failed to fetch posts"}), 500


@post_bp.route("/upload", methods=["POST"])
def upload():
    try:
        result = upload_post(request.files.get("file"))
        return jsonify({
            "message": "File uploaded successfully",
            "url": result["url"],
            "post": result["post"],
        }), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except (AssetStorageError, SQLAlchemyError):
        logger.exception("Error uploading file")
        return jsonify({"error": "Failed to upload file"}), 500


@post_bp.route("/posts/<int:post_id>/like", methods=["POST"])
def like(post_id):
    try:
        likes = like_post(post_id)
        return jsonify({"likes": likes}), 200
    except PostNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except SQLAlchemyError:
        logger.exception("Error liking post %s", post_id)
        return jsonify({"error": "Failed to like post"}), 500
