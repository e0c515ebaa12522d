from sqlalchemy import update

from app.models.post_model import Post
from app.db import db


def create_post(url, media_type):
    post = Post(
        url=url,
        type=media_type,
        likes=0,
        comments=0,
    )
    db.session.add(post)
    db.session.flush()

    return post


def get_posts():
    return Post.query.order_by(Post.id.desc()).all()


def _increment_counter(column, post_id):
    # One UPDATE ... RETURNING so concurrent callers never lose an increment.
    stmt = (
        update(Post)
        .where(Post.id == post_id)
        .values({column: column + 1})
        .returning(column)
        .execution_options(synchronize_session=False)
    )
    return db.session.execute(stmt).scalar_one_or_none()


def increment_likes(post_id):
    return _increment_counter(Post.likes, post_id)


def increment_comments(post_id):
    return _increment_counter(Post.comments, post_id)
