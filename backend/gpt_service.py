# gpt_service.py
import logging

import httpx

from config import Config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are MindMitra, a compassionate student mental health assistant.

User's detected mood: {mood}

Your role:
- Analyze the user's journal entry or message
- Provide 2-3 actionable, positive tips based on their mood
- Be supportive and encouraging
- Focus on student-specific challenges
- DO NOT provide medical advice
- Keep responses concise (2-3 sentences max)
- Use a warm, friendly tone

For different moods:
- Calm: Encourage maintaining this state, suggest productivity tips
- Motivated: Channel this energy into study goals, provide focus techniques
- Happy: Celebrate with them, suggest sharing positivity with others
- Stressed: Offer immediate stress relief techniques, remind them they can handle this
- Lonely: Provide connection suggestions, remind them they're not alone

Always end with encouragement and remind them that seeking help is brave."""

FALLBACK_RESPONSES = {
    "Calm": (
        "That's wonderful that you're feeling calm! This is a great state for focused "
        "studying. Try using this peaceful energy to tackle challenging topics. "
        "Remember, maintaining balance is key to long-term success."
    ),
    "Motivated": (
        "I love seeing your motivation! Channel this energy into setting specific study "
        "goals for today. Break big tasks into smaller wins. You've got this - your "
        "determination will take you far!"
    ),
    "Happy": (
        "Your happiness is contagious! 😊 This positive energy is perfect for learning new "
        "things. Consider sharing this joy with classmates or use it to tackle subjects "
        "you usually avoid. Keep spreading those good vibes!"
    ),
    "Stressed": (
        "I hear you, and stress before exams is completely normal. Try the 4-7-8 breathing "
        "technique: breathe in for 4, hold for 7, out for 8. Take one task at a time. "
        "You're stronger than you think!"
    ),
    "Lonely": (
        "Feeling lonely can be tough, especially during study periods. Remember, many "
        "students feel this way. Consider joining study groups, calling a friend, or "
        "visiting common areas. You're not alone in this journey!"
    ),
}

DEFAULT_FALLBACK = (
    "Thank you for sharing with me. Remember that it's okay to feel however you're "
    "feeling right now. Take things one step at a time, and don't hesitate to reach "
    "out for support when you need it. You're doing great! 💙"
)


def fallback_reply(mood):
    """Static supportive message for a mood, or the generic one."""
    return FALLBACK_RESPONSES.get(mood, DEFAULT_FALLBACK)


def generate_support_reply(message, mood, api_key=None, model=None, api_url=None,
                           client=None):
    """
    Ask the chat-completion API for a short supportive reply to `message`,
    framed by the detected `mood`.

    Any failure (no key configured, transport error, bad status, unexpected
    body) falls back to the canned reply for the mood. One attempt, no retries.
    """
    api_key = api_key if api_key is not None else Config.OPENAI_API_KEY
    model = model or Config.OPENAI_MODEL
    api_url = api_url or Config.OPENAI_API_URL

    if not api_key:
        logger.warning("OPENAI_API_KEY not configured; using fallback reply")
        return fallback_reply(mood)

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    body = {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT.format(mood=mood)},
            {"role": "user", "content": message},
        ],
        "max_tokens": 200,
        "temperature": 0.7,
    }

    try:
        if client is None:
            with httpx.Client(timeout=30) as own_client:
                resp = own_client.post(api_url, headers=headers, json=body)
        else:
            resp = client.post(api_url, headers=headers, json=body)
        logger.info("LLM status: %s", resp.status_code)
        resp.raise_for_status()
        data = resp.json()
        content = data["choices"][0]["message"]["content"].strip()
        if content:
            return content
        logger.warning("LLM returned an empty reply")

    except httpx.HTTPStatusError as e:
        logger.warning("LLM HTTP error %s: %s", e.response.status_code, e.response.text[:800])
    except httpx.HTTPError as e:
        logger.warning("LLM transport error: %s", e)
    except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
        logger.warning("Unexpected LLM response: %s", e)

    return fallback_reply(mood)
