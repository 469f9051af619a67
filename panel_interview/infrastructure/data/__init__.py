"""
Persistence of finished panel interviews.
"""

from .persistence import (
    InterviewStore, PanelInterviewRecord, QuestionRecord, AnswerRecord,
    PersistenceError, iso_timestamp
)

__all__ = [
    'InterviewStore',
    'PanelInterviewRecord',
    'QuestionRecord',
    'AnswerRecord',
    'PersistenceError',
    'iso_timestamp'
]
