from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

MAX_CONTENT_LENGTH = 500


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), unique=True, nullable=False, index=True)

    name = db.Column(db.Text, nullable=False)
    email = db.Column(db.Text)
    avatar_url = db.Column(db.Text)
    branch_year = db.Column(db.Text)
    sos_contact = db.Column(db.Text)

    wellness_points = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "avatar_url": self.avatar_url,
            "branch_year": self.branch_year,
            "sos_contact": self.sos_contact,
            "wellness_points": self.wellness_points or 0,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Profile user_id={self.user_id} points={self.wellness_points}>"


class JournalEntry(db.Model):
    __tablename__ = "journal_entries"
    __table_args__ = (
        db.CheckConstraint("mood_score >= 1 AND mood_score <= 5", name="ck_mood_score"),
        db.CheckConstraint(
            "mood_name IN ('Calm', 'Motivated', 'Happy', 'Stressed', 'Lonely')",
            name="ck_mood_name",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)

    content = db.Column(db.String(MAX_CONTENT_LENGTH), nullable=False)

    mood_score = db.Column(db.Integer, nullable=False)   # 1 (Calm) .. 5 (Lonely)
    mood_name = db.Column(db.String(16), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "content": self.content,
            "mood_score": self.mood_score,
            "mood_name": self.mood_name,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<JournalEntry id={self.id} mood={self.mood_name}>"


class Exam(db.Model):
    __tablename__ = "exams"
    __table_args__ = (
        db.CheckConstraint("max_marks > 0", name="ck_max_marks"),
        db.CheckConstraint("target_marks > 0", name="ck_target_marks"),
        db.CheckConstraint("obtained_marks >= 0", name="ck_obtained_marks"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)

    subject = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False)

    max_marks = db.Column(db.Integer, nullable=False)
    target_marks = db.Column(db.Integer, nullable=False)
    obtained_marks = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "subject": self.subject,
            "date": self.date.isoformat(),
            "max_marks": self.max_marks,
            "target_marks": self.target_marks,
            "obtained_marks": self.obtained_marks,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Exam id={self.id} subject={self.subject!r}>"


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)

    message = db.Column(db.Text, nullable=False)
    read_status = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "message": self.message,
            "read_status": self.read_status,
            "created_at": _iso(self.created_at),
        }


def _iso(value):
    return value.isoformat() + "Z" if value else None
