"""
Analytics and Monitoring

Tracks how the wiki chatbot is used: questions per session, which wiki
pages answers are drawn from, answers that cited nothing, and failures.
"""

from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional
import threading

RECENT_LIMIT = 50
TOP_SOURCES_LIMIT = 5


def _error_type(error: Optional[str]) -> str:
    # Route failures arrive as "ExceptionName: message"
    if error and ":" in error:
        return error.split(":")[0]
    return "Unknown"


# In-memory analytics store, reset on restart
class Analytics:
    def __init__(self):
        self.lock = threading.Lock()
        self.question_count = 0
        self.error_count = 0
        self.unsourced_count = 0
        self.total_response_time_ms = 0
        self.questions_by_session: Counter = Counter()
        self.source_citations: Counter = Counter()
        self.errors_by_type: Counter = Counter()
        self.recent_questions: List[Dict] = []

    def record_question(
        self,
        question: str,
        response_time_ms: int,
        success: bool,
        error: Optional[str] = None,
        session_id: Optional[str] = None,
        sources: Optional[List[str]] = None
    ):
        """Record an answered (or failed) question and the wiki pages it cited"""
        sources = sources or []
        with self.lock:
            self.question_count += 1
            self.total_response_time_ms += response_time_ms
            if session_id:
                self.questions_by_session[session_id] += 1

            if success:
                self.source_citations.update(sources)
                if not sources:
                    self.unsourced_count += 1
            else:
                self.error_count += 1
                self.errors_by_type[_error_type(error)] += 1

            self.recent_questions.append({
                "question": question[:100],
                "session_id": session_id,
                "success": success,
                "sources": list(sources),
                "response_time_ms": response_time_ms,
                "timestamp": datetime.now().isoformat(),
                "error": error,
            })
            del self.recent_questions[:-RECENT_LIMIT]

    def get_stats(self) -> Dict:
        """Get analytics summary"""
        with self.lock:
            sessions = len(self.questions_by_session)
            answered = self.question_count - self.error_count
            return {
                "total_questions": self.question_count,
                "total_errors": self.error_count,
                "success_rate": (
                    answered / self.question_count * 100
                    if self.question_count else 100.0
                ),
                "average_response_time_ms": round(
                    self.total_response_time_ms / self.question_count, 2
                ) if self.question_count else 0,
                "sessions_seen": sessions,
                "questions_per_session": round(
                    sum(self.questions_by_session.values()) / sessions, 2
                ) if sessions else 0,
                "answers_without_sources": self.unsourced_count,
                "top_sources": [
                    {"title": title, "count": count}
                    for title, count in self.source_citations.most_common(TOP_SOURCES_LIMIT)
                ],
                "errors_by_type": dict(self.errors_by_type),
                "recent_questions": self.recent_questions[-10:],
            }

    def reset(self):
        """Reset all analytics"""
        with self.lock:
            self.question_count = 0
            self.error_count = 0
            self.unsourced_count = 0
            self.total_response_time_ms = 0
            self.questions_by_session.clear()
            self.source_citations.clear()
            self.errors_by_type.clear()
            self.recent_questions.clear()


# Global analytics instance
analytics = Analytics()
