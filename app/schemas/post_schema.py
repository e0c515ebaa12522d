from app.extensions.extensions import ma


class PostSchema(ma.Schema):
    id = ma.Int()
    url = ma.Str()
    type = ma.Str()
    likes = ma.Int()
    comments = ma.Int()
