from app.extensions.extensions import ma



class CommentSchema(ma.Schema):
    id = ma.Int()
    post_id = ma.Int()
    text = ma.Str()
    created_at = ma.DateTime()
