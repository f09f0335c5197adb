from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

class Movie(db.Model): #movie model
    __tablename__ = "movie"
    id = db.Column(db.String(36), primary_key=True)          # uuid4 string
    position = db.Column(db.Integer, nullable=False, index=True)  # insertion order
    title = db.Column(db.String(255), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    director = db.Column(db.String(255), nullable=False)
    duration = db.Column(db.Integer, nullable=False)
    rate = db.Column(db.Integer, nullable=False, default=5)  # 0–10
    poster = db.Column(db.String(2048), nullable=False)
    genre = db.Column(db.JSON, nullable=False)               # list of genre names

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "director": self.director,
            "duration": self.duration,
            "rate": self.rate,
            "poster": self.poster,
            "genre": list(self.genre or []),
        }

    def __repr__(self):
        return f"<Movie {self.id} {self.title!r}>" #rep of the movie object
