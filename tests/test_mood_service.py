import pytest

from mood_service import (
    MOOD_KEYWORDS,
    MOOD_SCORES,
    classify_mood,
    describe_mood,
    keyword_counts,
    mood_color,
    mood_emoji,
)


@pytest.mark.parametrize("text,expected", [
    ("I feel so happy and cheerful today", ("Happy", 3)),
    ("Quiet, peaceful evening", ("Calm", 1)),
    ("Determined to achieve my goal", ("Motivated", 2)),
    ("Deadline pressure, I'm worried", ("Stressed", 4)),
    ("I feel alone and isolated", ("Lonely", 5)),
])
def test_single_mood_keywords(text, expected):
    assert classify_mood(text) == expected


@pytest.mark.parametrize("text", ["", "   \n\t", "The weather is cloudy", None])
def test_no_keywords_defaults_to_calm(text):
    assert classify_mood(text) == ("Calm", 1)


def test_highest_count_wins_over_first_match():
    # one Happy keyword, three Stressed keywords
    text = "Good morning but I am stressed, anxious and nervous"
    assert classify_mood(text) == ("Stressed", 4)


def test_tie_goes_to_first_declared_mood():
    # one Happy keyword, one Lonely keyword
    assert classify_mood("happy yet lonely") == ("Happy", 3)
    # one Calm keyword, one Stressed keyword
    assert classify_mood("calm before the deadline") == ("Calm", 1)


def test_matching_is_case_insensitive():
    assert classify_mood("MOTIVATED and FOCUSED") == ("Motivated", 2)


def test_each_keyword_counts_once():
    counts = keyword_counts("sad sad sad sad, but happy and joyful")
    assert counts["Lonely"] == 1
    # "happy" and "joy"
    assert counts["Happy"] == 2


def test_substring_matches_inside_longer_words():
    # "sad" inside "saddle" still counts towards Lonely
    assert classify_mood("I bought a new saddle") == ("Lonely", 5)
    # "exam" inside "example"
    assert classify_mood("for example") == ("Stressed", 4)


def test_every_keyword_detects_its_own_mood():
    for mood, keywords in MOOD_KEYWORDS.items():
        for keyword in keywords:
            detected, _ = classify_mood(keyword)
            counts = keyword_counts(keyword)
            best = max(counts.values())
            # a keyword may contain another mood's stem; it must at least score for its own mood
            assert counts[mood] >= 1
            assert counts[detected] == best


def test_score_map_is_fixed():
    assert MOOD_SCORES == {"Calm": 1, "Motivated": 2, "Happy": 3, "Stressed": 4, "Lonely": 5}


def test_colour_and_emoji_lookup():
    assert mood_color("Stressed") == "#FF3D00"
    assert mood_color("Confused") == "#6B7280"
    assert mood_emoji("Motivated") == "💪"
    assert mood_emoji("Confused") == "😐"
    assert describe_mood("Lonely") == {
        "mood": "Lonely", "score": 5, "color": "#9B59B6", "emoji": "😔",
    }
