"""
ui_state.py - UI state container
"""

from portal.auth.session import Session
from portal.services.chatbot import Conversation


class AppState:
    def __init__(self, session: Session):
        self.session = session
        self.current_screen: str | None = None
        # Controller of the mounted list screen; disposed on navigation
        self.controller = None
        self.conversation = Conversation()
        self.roster_semester: str = "all"
        self.roster_course: str = "all"
        self.roster_search: str = ""
        self.request_status: str = "all"
        self.request_search: str = ""
        self.feedback_target: str = "all"

    def reset(self) -> None:
        """Forget per-user screen state after sign-out."""
        self.current_screen = None
        self.controller = None
        self.conversation = Conversation()
        self.roster_semester = "all"
        self.roster_course = "all"
        self.roster_search = ""
        self.request_status = "all"
        self.request_search = ""
        self.feedback_target = "all"
