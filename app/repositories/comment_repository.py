from app.db import db
from app.models.comment_model import Comment


def create_comment(post_id, text):
    comment = Comment(
        post_id=post_id,
        text=text,
    )

    db.session.add(comment)
    db.session.flush()
    return comment


def get_comments_by_post(post_id):
    return (
        Comment.query
        .filter(Comment.post_id == post_id)
        .order_by(
            Comment.created_at.desc(),
            Comment.id.desc(),
        )
        .all()
    )
