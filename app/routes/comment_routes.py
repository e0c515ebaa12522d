import logging

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError

from app.services.comment_service import add_comment, get_post_comments
from app.services.post_service import PostNotFoundError

logger = logging.getLogger(__name__)

comment_bp = Blueprint("comments", __name__)

@comment_bp.route("/posts/<int:post_id>/comment", methods=["POST"])
def create_comment(post_id):
    data = request.get_json(silent=True)
    text = data.get("text") if isinstance(data, dict) else None

    try:
        comments = add_comment(post_id=post_id, text=text)
        return jsonify({"comments": comments}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except PostNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except SQLAlchemyError:
        logger.exception("Error commenting on post %s", post_id)
        return jsonify({"error": "Failed to comment on post"}), 500


@comment_bp.route("/posts/<int:post_id>/comments", methods=["GET"])
def list_comments(post_id):
    try:
        return jsonify(get_post_comments(post_id)), 200
    except SQLAlchemyError:
        logger.exception("Error fetching comments for post %s", post_id)
        return jsonify({"error": "Failed to fetch comments"}), 500
