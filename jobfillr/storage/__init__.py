from .answers_store import AnswerStore
from .db import Database, get_database
from .profile_store import ProfileStore
from .templates_store import TemplateStore

__all__ = ["AnswerStore", "Database", "ProfileStore", "TemplateStore", "get_database"]
