import logging
from datetime import datetime
from functools import wraps

from flask import Flask, request, jsonify, g, current_app
from flask_cors import CORS
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from models import db, JournalEntry, Exam, Notification, MAX_CONTENT_LENGTH
from mood_service import classify_mood, describe_mood, DEFAULT_MOOD
from gpt_service import generate_support_reply
from exam_service import (
    ExamValidationError,
    describe_exam,
    exam_stats,
    validate_exam_update,
    validate_new_exam,
)
from points_service import (
    EXAM_POINTS,
    EXERCISE_POINTS,
    JOURNAL_POINTS,
    award_points,
    ensure_profile,
)

logger = logging.getLogger(__name__)

QUICK_ACTIONS = {
    "breathing": (
        "Starting a 5-minute breathing exercise. Breathe in for 4 counts, hold for 4, "
        "breathe out for 6. Focus on your breath and let go of any tension."
    ),
    "meditation": (
        "Beginning guided meditation. Find a comfortable position, close your eyes, and "
        "focus on the present moment. You're doing great by taking this time for yourself."
    ),
    "mindfulness": (
        "Here's a mindfulness prompt: Take a moment to notice 5 things you can see, 4 things "
        "you can touch, 3 things you can hear, 2 things you can smell, and 1 thing you can "
        "taste. This grounds you in the present moment."
    ),
}


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=str(app.config["LOG_LEVEL"]).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Init DB
    db.init_app(app)
    with app.app_context():
        db.create_all()

    # --- CORS (allow your deployed frontend origin if provided) ---
    frontend_origin = app.config.get("FRONTEND_ORIGIN")
    if frontend_origin:
        CORS(app, resources={r"/*": {"origins": [frontend_origin]}})
    else:
        CORS(app)

    register_routes(app)
    return app


# ---------- Helpers ----------

def require_user(view):
    """Scope the request to the caller identified by the X-User-Id header."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        user_id = (request.headers.get("X-User-Id") or "").strip()
        if not user_id:
            return jsonify({"error": "Missing X-User-Id header"}), 401
        g.user_id = user_id
        return view(*args, **kwargs)
    return wrapper


def json_object():
    """Request body as a dict; None when it is JSON but not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def bad_body():
    return jsonify({"error": "Request body must be a JSON object"}), 400


def text_or_none(value):
    """Accept a string or a missing value; anything else is a client error."""
    if value is None or isinstance(value, str):
        return value
    raise TypeError


def storage_error(action, exc):
    db.session.rollback()
    logger.error("Failed to %s for user %s: %s", action, g.get("user_id"), exc)
    return jsonify({"error": f"Failed to {action}"}), 500


def notify(user_id, message):
    db.session.add(Notification(user_id=user_id, message=message))
    db.session.commit()


def owned(model, row_id):
    return db.session.execute(
        select(model).where(model.id == row_id, model.user_id == g.user_id)
    ).scalar_one_or_none()


def atomic_points():
    return current_app.config.get("ATOMIC_POINTS", False)


# ---------- Routes ----------

def register_routes(app):

    @app.route("/health")
    def health():
        """Simple health check + DB connectivity test."""
        db_ok = True
        try:
            with db.engine.connect() as conn:
                conn.execute(db.text("SELECT 1"))
        except SQLAlchemyError:
            db_ok = False
        return jsonify({
            "ok": True,
            "db_ok": db_ok,
            "model": app.config["OPENAI_MODEL"],
            "time": datetime.utcnow().isoformat() + "Z"
        }), 200

    # --- Profile ---

    @app.route("/profile", methods=["POST"])
    @require_user
    def create_profile():
        """Create the caller's profile if it does not exist yet."""
        data = json_object()
        if data is None:
            return bad_body()
        try:
            name = text_or_none(data.get("name")) or text_or_none(data.get("full_name"))
            email = text_or_none(data.get("email"))
        except TypeError:
            return jsonify({"error": "'name', 'full_name' and 'email' must be text"}), 400
        name = (name or "").strip() or None
        try:
            profile, created = ensure_profile(g.user_id, name=name, email=email)
        except SQLAlchemyError as e:
            return storage_error("initialize user profile", e)
        return jsonify(profile.to_dict()), 201 if created else 200

    @app.route("/profile", methods=["GET"])
    @require_user
    def get_profile():
        """Fetch the caller's profile, creating it on first access."""
        try:
            profile, _ = ensure_profile(
                g.user_id,
                name=request.headers.get("X-User-Name"),
                email=request.headers.get("X-User-Email"),
            )
        except SQLAlchemyError as e:
            return storage_error("initialize user profile", e)
        return jsonify(profile.to_dict()), 200

    # --- Journal ---

    @app.route("/journal", methods=["POST"])
    @require_user
    def create_journal_entry():
        """Classify + save one entry, award points, then ask for a supportive reply."""
        data = json_object()
        if data is None:
            return bad_body()
        content = data.get("content") or ""
        if not isinstance(content, str):
            return jsonify({"error": "'content' must be text"}), 400
        if not content.strip():
            return jsonify({"error": "Missing 'content' text"}), 400
        if len(content) > MAX_CONTENT_LENGTH:
            return jsonify({"error": f"Entry is limited to {MAX_CONTENT_LENGTH} characters"}), 400

        mood, score = classify_mood(content)

        # The entry is committed on its own; later failures do not undo it.
        try:
            entry = JournalEntry(user_id=g.user_id, content=content,
                                 mood_score=score, mood_name=mood)
            db.session.add(entry)
            db.session.commit()
        except SQLAlchemyError as e:
            return storage_error("save journal entry", e)

        try:
            points = award_points(g.user_id, JOURNAL_POINTS, atomic=atomic_points())
        except SQLAlchemyError as e:
            return storage_error("update wellness points", e)

        reply = generate_support_reply(
            content,
            mood,
            api_key=app.config.get("OPENAI_API_KEY"),
            model=app.config.get("OPENAI_MODEL"),
            api_url=app.config.get("OPENAI_API_URL"),
        )

        try:
            notify(g.user_id,
                   f"Journal saved! Mood detected: {mood}. +{JOURNAL_POINTS} wellness points earned!")
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning("Could not record notification: %s", e)

        return jsonify({
            "entry": entry.to_dict(),
            "mood": describe_mood(mood),
            "reply": reply,
            "wellness_points": points,
        }), 201

    @app.route("/journal", methods=["GET"])
    @require_user
    def list_journal_entries():
        """List the caller's entries (latest first)."""
        limit = request.args.get("limit", type=int)
        if limit is not None and limit < 1:
            return jsonify({"error": "'limit' must be a positive number"}), 400
        query = (
            select(JournalEntry)
            .where(JournalEntry.user_id == g.user_id)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        items = db.session.execute(query).scalars().all()
        return jsonify([it.to_dict() for it in items]), 200

    @app.route("/journal/mood", methods=["GET"])
    @require_user
    def latest_mood():
        """Mood of the most recent entry, Calm when there is none."""
        mood = db.session.execute(
            select(JournalEntry.mood_name)
            .where(JournalEntry.user_id == g.user_id)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            .limit(1)
        ).scalar_one_or_none()
        return jsonify(describe_mood(mood or DEFAULT_MOOD)), 200

    @app.route("/journal/<int:entry_id>", methods=["DELETE"])
    @require_user
    def delete_journal_entry(entry_id: int):
        it = owned(JournalEntry, entry_id)
        if not it:
            return jsonify({"error": "Not found"}), 404
        db.session.delete(it)
        db.session.commit()
        return jsonify({"ok": True, "deleted": entry_id}), 200

    # --- Chat assistant ---

    @app.route("/chat", methods=["POST"])
    def chat():
        data = json_object()
        if data is None:
            return bad_body()
        try:
            message = (text_or_none(data.get("message")) or "").strip()
            mood = text_or_none(data.get("mood")) or DEFAULT_MOOD
        except TypeError:
            return jsonify({"error": "'message' and 'mood' must be text"}), 400
        if not message:
            return jsonify({"error": "Missing 'message' text"}), 400
        reply = generate_support_reply(
            message,
            mood,
            api_key=app.config.get("OPENAI_API_KEY"),
            model=app.config.get("OPENAI_MODEL"),
            api_url=app.config.get("OPENAI_API_URL"),
        )
        return jsonify({"response": reply}), 200

    @app.route("/quick-actions/<action>", methods=["POST"])
    @require_user
    def quick_action(action):
        message = QUICK_ACTIONS.get(action)
        if message is None:
            return jsonify({"error": f"Unknown action '{action}'"}), 404
        try:
            points = award_points(g.user_id, EXERCISE_POINTS, atomic=atomic_points())
            notify(g.user_id,
                   f"Great job! +{EXERCISE_POINTS} wellness points for practicing self-care!")
        except SQLAlchemyError as e:
            return storage_error("update wellness points", e)
        return jsonify({"action": action, "message": message, "wellness_points": points}), 200

    # --- Exams ---

    @app.route("/exams", methods=["GET"])
    @require_user
    def list_exams():
        exams = db.session.execute(
            select(Exam).where(Exam.user_id == g.user_id).order_by(Exam.date.asc(), Exam.id.asc())
        ).scalars().all()
        return jsonify({
            "exams": [describe_exam(e) for e in exams],
            "stats": exam_stats(exams),
        }), 200

    @app.route("/exams", methods=["POST"])
    @require_user
    def add_exam():
        data = json_object()
        if data is None:
            return bad_body()
        try:
            values = validate_new_exam(data)
        except ExamValidationError as e:
            return jsonify({"error": str(e)}), 400

        try:
            exam = Exam(user_id=g.user_id, **values)
            db.session.add(exam)
            db.session.commit()
        except SQLAlchemyError as e:
            return storage_error("add exam", e)

        try:
            points = award_points(g.user_id, EXAM_POINTS, atomic=atomic_points())
            notify(g.user_id,
                   f"Exam added successfully! +{EXAM_POINTS} wellness points for staying organized!")
        except SQLAlchemyError as e:
            return storage_error("update wellness points", e)

        return jsonify({"exam": describe_exam(exam), "wellness_points": points}), 201

    @app.route("/exams/<int:exam_id>", methods=["PATCH"])
    @require_user
    def update_exam(exam_id: int):
        exam = owned(Exam, exam_id)
        if not exam:
            return jsonify({"error": "Not found"}), 404
        data = json_object()
        if data is None:
            return bad_body()
        try:
            updates = validate_exam_update(exam, data)
        except ExamValidationError as e:
            return jsonify({"error": str(e)}), 400

        try:
            for field, value in updates.items():
                setattr(exam, field, value)
            db.session.commit()
        except SQLAlchemyError as e:
            return storage_error("update exam", e)
        return jsonify(describe_exam(exam)), 200

    @app.route("/exams/<int:exam_id>", methods=["DELETE"])
    @require_user
    def delete_exam(exam_id: int):
        exam = owned(Exam, exam_id)
        if not exam:
            return jsonify({"error": "Not found"}), 404
        db.session.delete(exam)
        db.session.commit()
        return jsonify({"ok": True, "deleted": exam_id}), 200

    # --- Notifications ---

    @app.route("/notifications", methods=["GET"])
    @require_user
    def list_notifications():
        query = select(Notification).where(Notification.user_id == g.user_id)
        if request.args.get("unread") == "1":
            query = query.where(Notification.read_status.is_(False))
        items = db.session.execute(
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
        ).scalars().all()
        return jsonify([n.to_dict() for n in items]), 200

    @app.route("/notifications/<int:notification_id>", methods=["PATCH"])
    @require_user
    def update_notification(notification_id: int):
        note = owned(Notification, notification_id)
        if not note:
            return jsonify({"error": "Not found"}), 404
        data = json_object()
        if data is None:
            return bad_body()
        read_status = data.get("read_status", True)
        if not isinstance(read_status, bool):
            return jsonify({"error": "'read_status' must be true or false"}), 400
        note.read_status = read_status
        db.session.commit()
        return jsonify(note.to_dict()), 200

    @app.route("/init-db")
    def init_db():
        """Optional: safe-guarded table creation endpoint (disable in prod)."""
        if not app.config.get("ALLOW_INIT_DB"):
            return jsonify({"error": "init disabled"}), 403
        db.create_all()
        return jsonify({"ok": True, "message": "Tables created"}), 200


if __name__ == "__main__":
    application = create_app()
    application.run(
        host="0.0.0.0",
        port=application.config["PORT"],
        debug=True
    )
