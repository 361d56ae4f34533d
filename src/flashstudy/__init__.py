"""flashstudy: spaced-repetition study sessions with checklist-graded answers."""

from .consts import VERSION

__version__ = VERSION
