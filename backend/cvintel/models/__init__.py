from cvintel.models.user import User
from cvintel.models.cv import CV, CVScore, CVReport

__all__ = ["User", "CV", "CVScore", "CVReport"]
