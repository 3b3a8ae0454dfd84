"""Exam validation and the derived numbers shown on the exam tracker."""
from datetime import date, datetime


class ExamValidationError(ValueError):
    """Raised for exam input rejected before anything is written."""


def exam_progress(obtained_marks, target_marks, max_marks):
    """
    Percentage for the exam progress bar.

    Before a score is entered this is how ambitious the target is
    (target / max). Afterwards it is performance against the target,
    capped at 100.
    """
    if obtained_marks is None:
        return target_marks / max_marks * 100
    return min(obtained_marks / target_marks * 100, 100)


def progress_color(percentage):
    if percentage >= 90:
        return "green"
    if percentage >= 70:
        return "blue"
    if percentage >= 50:
        return "yellow"
    return "red"


def time_until_exam(exam_date, today=None):
    today = today or date.today()
    days = (exam_date - today).days
    if days < 0:
        return "Past"
    if days == 0:
        return "Today!"
    if days == 1:
        return "Tomorrow"
    return f"{days} days"


def exam_stats(exams, today=None):
    today = today or date.today()
    return {
        "total": len(exams),
        "upcoming": sum(1 for e in exams if e.date > today),
        "completed": sum(1 for e in exams if e.obtained_marks is not None),
    }


def describe_exam(exam, today=None):
    data = exam.to_dict()
    progress = exam_progress(exam.obtained_marks, exam.target_marks, exam.max_marks)
    data["progress"] = round(progress, 2)
    data["progress_color"] = progress_color(progress)
    data["time_until"] = time_until_exam(exam.date, today)
    return data


def _parse_int(value, field):
    if isinstance(value, bool):
        raise ExamValidationError(f"'{field}' must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ExamValidationError(f"'{field}' must be a whole number")


def _parse_subject(value):
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ExamValidationError("'subject' must be text")
    return value.strip()


def _parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        # Full ISO timestamps are accepted too; only the calendar date is kept.
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ExamValidationError("'date' must be YYYY-MM-DD")


def validate_new_exam(data):
    """Check an add-exam payload and return clean column values."""
    subject = _parse_subject(data.get("subject"))
    raw_date = data.get("date")
    raw_max = data.get("max_marks")
    raw_target = data.get("target_marks")
    if not subject or not raw_date or raw_max in (None, "") or raw_target in (None, ""):
        raise ExamValidationError("Please fill in all fields")

    max_marks = _parse_int(raw_max, "max_marks")
    target_marks = _parse_int(raw_target, "target_marks")
    if max_marks <= 0 or target_marks <= 0:
        raise ExamValidationError("Marks must be greater than zero")
    if target_marks > max_marks:
        raise ExamValidationError("Target marks cannot be higher than maximum marks")

    return {
        "subject": subject,
        "date": _parse_date(raw_date),
        "max_marks": max_marks,
        "target_marks": target_marks,
    }


def validate_exam_update(exam, data):
    """Check a partial update against the exam's current values."""
    updates = {}
    if "subject" in data:
        subject = _parse_subject(data.get("subject"))
        if not subject:
            raise ExamValidationError("'subject' cannot be empty")
        updates["subject"] = subject
    if "date" in data:
        updates["date"] = _parse_date(data.get("date"))
    for field in ("max_marks", "target_marks"):
        if field in data:
            updates[field] = _parse_int(data.get(field), field)
            if updates[field] <= 0:
                raise ExamValidationError("Marks must be greater than zero")
    if "obtained_marks" in data:
        raw = data.get("obtained_marks")
        if raw is None:
            updates["obtained_marks"] = None
        else:
            updates["obtained_marks"] = _parse_int(raw, "obtained_marks")
            if updates["obtained_marks"] < 0:
                raise ExamValidationError("Obtained marks cannot be negative")

    if not updates:
        raise ExamValidationError("No updates provided")

    max_marks = updates.get("max_marks", exam.max_marks)
    target_marks = updates.get("target_marks", exam.target_marks)
    if target_marks > max_marks:
        raise ExamValidationError("Target marks cannot be higher than maximum marks")
    return updates
