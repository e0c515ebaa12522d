import logging

from app.db import db
from app.repositories import post_repository
from app.schemas.post_schema import PostSchema
from app.services.asset_sink import get_asset_sink


logger = logging.getLogger(__name__)

post_schema = PostSchema()
posts_schema = PostSchema(many=True)


class PostNotFoundError(LookupError):
    def __init__(self, post_id):
        super().__init__("Post not found")
        self.post_id = post_id


def classify_media_type(mimetype) -> str:
    return "image" if (mimetype or "").startswith("image") else "video"


def upload_post(file_storage):
    """Store the uploaded file, then record it as a new post.

    The file is not removed again if the insert fails afterwards.
    """
    if file_storage is None or not getattr(file_storage, "filename", ""):
        raise ValueError("No file uploaded")

    stored = get_asset_sink().save(file_storage)

    try:
        post = post_repository.create_post(
            url=stored.url,
            media_type=classify_media_type(file_storage.mimetype),
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.error("Stored %s but could not record the post", stored.url)
        raise

    logger.info("Created post %s (%s) for %s", post.id, post.type, stored.url)
    return {"url": stored.url, "post": post_schema.dump(post)}


def get_posts():
    return posts_schema.dump(post_repository.get_posts())


def like_post(post_id: int) -> int:
    try:
        likes = post_repository.increment_likes(post_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    if likes is None:
        raise PostNotFoundError(post_id)
    return likes
