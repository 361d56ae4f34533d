# Application Package
from .answer_parser import ParsedAnswer, parse_answer
from .sr_calculator import SRCalculator
from .study_session import RatingOutcome, StudySession

__all__ = ["ParsedAnswer", "parse_answer", "SRCalculator", "RatingOutcome", "StudySession"]
