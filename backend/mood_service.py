"""Keyword-based mood detection for journal entries.

Each mood owns a fixed list of lowercase keyword stems. A mood scores one
point per keyword found anywhere in the text (plain substring match, so
"sad" also hits "saddle"). The highest score wins; ties go to the mood
declared first in MOOD_KEYWORDS.
"""

DEFAULT_MOOD = "Calm"

# Declaration order is the tie-break order.
MOOD_KEYWORDS = {
    "Happy": ["happy", "joy", "excited", "great", "awesome", "wonderful",
              "amazing", "fantastic", "good", "positive", "cheerful"],
    "Calm": ["calm", "peaceful", "relaxed", "serene", "tranquil", "quiet",
             "content", "balanced", "zen", "steady"],
    "Motivated": ["motivated", "determined", "focused", "energetic", "productive",
                  "driven", "ambitious", "goal", "achieve", "success"],
    "Stressed": ["stressed", "anxious", "worried", "overwhelmed", "pressure",
                 "deadline", "exam", "nervous", "tense", "frustrated"],
    "Lonely": ["lonely", "alone", "isolated", "sad", "depressed", "empty",
               "disconnected", "missing", "solitary", "withdrawn"],
}

MOOD_SCORES = {"Calm": 1, "Motivated": 2, "Happy": 3, "Stressed": 4, "Lonely": 5}

MOOD_COLORS = {
    "Calm": "#0077FF",
    "Motivated": "#00C851",
    "Happy": "#FFDD00",
    "Stressed": "#FF3D00",
    "Lonely": "#9B59B6",
}
DEFAULT_COLOR = "#6B7280"

MOOD_EMOJIS = {
    "Happy": "😊",
    "Calm": "😌",
    "Motivated": "💪",
    "Stressed": "😰",
    "Lonely": "😔",
}
DEFAULT_EMOJI = "😐"


def keyword_counts(text):
    """Number of distinct keywords from each mood present in `text`."""
    lower = (text or "").lower()
    return {
        mood: sum(1 for keyword in keywords if keyword in lower)
        for mood, keywords in MOOD_KEYWORDS.items()
    }


def classify_mood(text):
    """Return (mood, score) for a piece of free text.

    Text with no keyword hits, including empty text, is Calm / 1.
    """
    best_count = 0
    detected = DEFAULT_MOOD
    for mood, count in keyword_counts(text).items():
        if count > best_count:
            best_count = count
            detected = mood
    return detected, MOOD_SCORES[detected]


def mood_color(mood):
    return MOOD_COLORS.get(mood, DEFAULT_COLOR)


def mood_emoji(mood):
    return MOOD_EMOJIS.get(mood, DEFAULT_EMOJI)


def describe_mood(mood):
    """Mood label with its score, ring colour and emoji for API responses."""
    return {
        "mood": mood,
        "score": MOOD_SCORES.get(mood),
        "color": mood_color(mood),
        "emoji": mood_emoji(mood),
    }
