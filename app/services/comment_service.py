import logging

from sqlalchemy.exc import IntegrityError

from app.db import db
from app.repositories import post_repository
from app.repositories.comment_repository import create_comment, get_comments_by_post
from app.schemas.comment_schema import CommentSchema
from app.services.post_service import PostNotFoundError


logger = logging.getLogger(__name__)

comments_schema = CommentSchema(many=True)


def add_comment(post_id: int, text) -> int:
    """Insert the comment, then bump the post's counter.

    The two writes are committed separately. When the post does not exist
    and the database does not enforce the foreign key, the comment row is
    left behind and PostNotFoundError is still raised.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Comment text is required")

    try:
        create_comment(post_id=post_id, text=text.strip())
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise PostNotFoundError(post_id) from e
    except Exception:
        db.session.rollback()
        raise

    try:
        comments = post_repository.increment_comments(post_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    if comments is None:
        logger.warning("Comment stored for missing post %s", post_id)
        raise PostNotFoundError(post_id)
    return comments


def get_post_comments(post_id: int):
    return comments_schema.dump(get_comments_by_post(post_id))
