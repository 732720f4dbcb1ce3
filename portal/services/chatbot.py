"""
chatbot.py - Scripted help assistant
Single responsibility: answer questions from an ordered keyword rule list.
"""

from dataclasses import dataclass, field

from portal.domain.models import ChatMessage
from portal.utils.time import now_iso

GREETING = "Hello! I'm your AI assistant. How can I help you today?"

QUICK_QUESTIONS: list[str] = [
    "How to enroll in a course?",
    "How to submit an assignment?",
    "Where can I see my results?",
    "How to search for books?",
]


@dataclass(frozen=True)
class Rule:
    keywords: tuple[str, ...]
    response: str

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


# Evaluated top to bottom; first match wins
RULES: tuple[Rule, ...] = (
    Rule(
        ("course", "enroll"),
        "To enroll in a course, go to the Courses page and click 'Enroll in Course'. "
        "You'll need to provide the course code, select the semester and section. "
        "Make sure you meet the prerequisites!",
    ),
    Rule(
        ("assignment", "submit"),
        "To submit an assignment, go to the Assignments page, find your assignment, "
        "and click 'Submit'. You can upload files (PDF, DOC, DOCX) and add comments. "
        "Remember to submit before the deadline!",
    ),
    Rule(
        ("result", "grade", "cgpa"),
        "You can view your results and CGPA on the Results page. It shows "
        "semester-wise grades and calculates your overall CGPA. Your current CGPA "
        "is displayed on the dashboard.",
    ),
    Rule(
        ("library", "book"),
        "To search for books, go to the Library page and click 'Search Books'. "
        "You can view your currently borrowed books and their due dates there.",
    ),
    Rule(
        ("timetable", "schedule"),
        "Your class timetable is available on the Timetable page. It shows your "
        "daily schedule with course timings and room numbers.",
    ),
    Rule(
        ("notification", "alert"),
        "Check the Notifications page for all announcements, assignment deadlines, "
        "and important updates. You can mark notifications as read or delete them.",
    ),
    Rule(
        ("hello", "hi", "hey"),
        "Hello! I'm here to help you with your academic queries. You can ask me "
        "about courses, assignments, results, library, timetable, or anything else "
        "related to your studies.",
    ),
)


def fallback_response(text: str) -> str:
    return (
        f"I understand you're asking about: {text}. For more specific help, you can "
        "ask about courses, assignments, results, library, timetable, or "
        "notifications. How can I assist you further?"
    )


def reply_to(text: str, rules: tuple[Rule, ...] = RULES) -> str:
    lowered = text.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.response
    return fallback_response(text)


@dataclass
class Conversation:
    """Visible transcript; the only state the assistant keeps."""

    messages: list[ChatMessage] = field(default_factory=list)

    def __post_init__(self):
        if not self.messages:
            self._append("bot", GREETING)

    def _append(self, sender: str, text: str) -> ChatMessage:
        msg = ChatMessage(
            sender=sender, text=text, timestamp=now_iso(), id=len(self.messages) + 1
        )
        self.messages.append(msg)
        return msg

    def say(self, text: str) -> ChatMessage | None:
        """Record the user's message. Blank input is ignored."""
        if not text or not text.strip():
            return None
        return self._append("user", text)

    def answer(self, text: str) -> ChatMessage:
        return self._append("bot", reply_to(text))

    def ask(self, text: str) -> ChatMessage | None:
        """Record the user's message and the bot's answer."""
        if self.say(text) is None:
            return None
        return self.answer(text)
