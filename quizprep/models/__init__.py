from quizprep.models.user import User, UserType
from quizprep.models.curriculum import Subject, Topic, Question, TestSeries, TestSeriesQuestion
from quizprep.models.practice import PracticeSession, SessionQuestion, UserAnswer
from quizprep.models.analytics import TopicAnalytics

__all__ = [
    "User", "UserType", "Subject", "Topic", "Question", "TestSeries",
    "TestSeriesQuestion", "PracticeSession", "SessionQuestion", "UserAnswer",
    "TopicAnalytics"
]
