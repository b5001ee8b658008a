"""FlashQuiz: turn PDF exam papers into interactive quizzes with Gemini."""

__version__ = "0.1.0"
