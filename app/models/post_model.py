from app.db import db


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    url = db.Column(db.String(1024), nullable=False)
    type = db.Column(db.String(10), nullable=False)  # "image" | "video"
    likes = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    comments = db.Column(db.Integer, nullable=False, default=0, server_default="0")
