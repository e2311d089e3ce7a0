import anthropic
import httpx
from langchain_ollama import ChatOllama
from langchain_anthropic import ChatAnthropic
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.output_parsers import StrOutputParser
from loguru import logger
from typing import List, Optional
from datetime import date
from studyplan.config import settings
from studyplan.schemas import WEEKDAYS, Subject, WeekSchedule


UNAUTHORIZED = "unauthorized"
RATE_LIMITED = "rate_limited"
NETWORK = "network"
UNKNOWN = "unknown"

ERROR_MESSAGES = {
    UNAUTHORIZED: "Your API key may be invalid. Please check the API key.",
    RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    NETWORK: "Network error. Please check your internet connection.",
    UNKNOWN: "I encountered an error. Please try again.",
}


class ExplainerError(Exception):
    """Categorized failure of the topic explainer service"""

    def __init__(self, category: str, detail: str = ""):
        self.category = category
        self.detail = detail
        super().__init__(f"{category}: {detail}" if detail else category)

    @property
    def user_message(self) -> str:
        return ERROR_MESSAGES.get(self.category, ERROR_MESSAGES[UNKNOWN])


def _status_code(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify_error(exc: BaseException) -> str:
    """Map a provider exception (or anything in its cause chain) to an error category"""
    seen = set()
    current = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))

        status = _status_code(current)
        if status in (401, 403):
            return UNAUTHORIZED
        if status == 429:
            return RATE_LIMITED
        if isinstance(current, (httpx.TransportError, anthropic.APIConnectionError, ConnectionError, TimeoutError)):
            return NETWORK

        current = current.__cause__ or current.__context__
    return UNKNOWN


def get_explainer():
    """Factory function to return the appropriate explainer based on config"""
    if settings.ai_provider.lower() == "claude":
        return ClaudeExplainer()
    else:
        return OllamaExplainer()


def study_context(subjects: List[Subject], schedule: Optional[WeekSchedule] = None, today: Optional[date] = None) -> str:
    """One-line description of what the learner is studying, for the prompt"""
    if not subjects:
        return "Student is using an AI study planner for engineering subjects."

    context = "The student is studying: " + ", ".join(
        f"{s.name} (Confidence: {s.confidence}/5, Weak Areas: {', '.join(s.weak_areas) or 'none'})"
        for s in subjects
    )

    if schedule:
        today = today or date.today()
        slots = schedule.get(WEEKDAYS[today.weekday()], [])
        if slots:
            context += " Current focus topics: " + ", ".join(f"{slot.topic} in {slot.subject}" for slot in slots)

    return context


class BaseExplainer:
    """Base class for the language-model topic explainer"""

    def __init__(self):
        self.llm = None
        self.parser = StrOutputParser()

    def explain_topic(self, topic: str, subject: str, context: Optional[str] = None) -> str:
        """
        Ask the language model to explain a topic.

        Args:
            topic: Topic to explain (e.g., "Deadlocks")
            subject: Subject the topic belongs to
            context: Optional study context from study_context()

        Returns:
            Explanation text

        Raises:
            ExplainerError: categorized as unauthorized, rate_limited, network or unknown
        """
        messages = [("system", self._build_system_prompt())]
        if context:
            messages.append(("system", "Study context: {context}"))
        messages.append(("human", "Can you explain {topic} in {subject} for engineering students? "
                                  "Include key concepts and study tips."))
        prompt = ChatPromptTemplate.from_messages(messages)

        chain = prompt | self.llm | self.parser

        try:
            return chain.invoke({"topic": topic, "subject": subject, "context": context or ""})
        except Exception as e:
            category = classify_error(e)
            logger.warning(f"{self.__class__.__name__} failed to explain {topic!r} ({category}): {e}")
            raise ExplainerError(category, str(e)) from e

    def _build_system_prompt(self) -> str:
        """Build system prompt for LLM"""
        return ("You are an AI study assistant for engineering students. "
                "You must ALWAYS respond in English only, regardless of the language the user uses. "
                "Always use proper English grammar and spelling.")


class OllamaExplainer(BaseExplainer):
    """Explainer using local Ollama for development"""

    def __init__(self):
        super().__init__()
        self.llm = ChatOllama(
            model=settings.ollama_model,
            base_url=settings.ollama_base_url,
            temperature=settings.explainer_temperature,
            num_predict=settings.explainer_max_tokens
        )


class ClaudeExplainer(BaseExplainer):
    """Explainer using Claude API for production"""

    def __init__(self):
        super().__init__()
        if not settings.claude_api_key:
            raise ExplainerError(UNAUTHORIZED, "CLAUDE_API_KEY not set in environment variables")

        self.llm = ChatAnthropic(
            model=settings.claude_model,
            api_key=settings.claude_api_key,
            temperature=settings.explainer_temperature,
            max_tokens=settings.explainer_max_tokens
        )
