import logging
import re
from typing import Optional

import requests
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import AzureChatOpenAI

from learnlab.core.config import Settings, settings
from learnlab.core.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

YOUTUBE_ID_PATTERN = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\n?#]+)")

EXPLANATION_SYSTEM_PROMPT = (
    "You are an expert science educator. Summarize video transcripts into brief, "
    "easy-to-understand explanations for high school students."
)

QUESTION_SYSTEM_PROMPT = (
    "You are an expert educator. Generate high-quality multiple choice questions."
)

QUESTION_PROMPT = """Generate exactly {num_questions} multiple choice quiz questions about the following experiment:

Experiment: {name}
Description: {explanation}

Return the questions as a JSON array with this exact structure:
[
  {{
    "question": "Question text here?",
    "options": [
      {{ "text": "Option 1", "is_correct": false }},
      {{ "text": "Option 2", "is_correct": true }},
      {{ "text": "Option 3", "is_correct": false }},
      {{ "text": "Option 4", "is_correct": false }}
    ]
  }}
]

Requirements:
- Each question must have exactly 4 options
- Exactly one option must be marked as is_correct: true
- Questions should test understanding of the experiment
- Return ONLY valid JSON, no other text"""

TUTOR_SYSTEM_PROMPT = """You are a helpful AI tutor for a high school science experiment learning platform. The student is learning about the "{name}" experiment.

Experiment context:
{explanation}

Provide clear, concise answers to help students understand."""


def extract_video_id(url: str) -> Optional[str]:
    match = YOUTUBE_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


def fallback_explanation(youtube_url: str) -> str:
    video_id = extract_video_id(youtube_url)
    link = f"https://youtu.be/{video_id}" if video_id else youtube_url
    return (
        f"No description was provided. Please watch the reference video ({link}) "
        "and update this description from the Faculty dashboard."
    )


class AIService:
    """Text generation collaborator backed by Azure OpenAI through LangChain"""

    def __init__(self, config: Settings = settings):
        self.config = config

    def is_configured(self) -> bool:
        return bool(self.config.AOAI_API_KEY and self.config.AOAI_ENDPOINT)

    def _get_llm(self, temperature: float, max_tokens: int):
        """Get Azure OpenAI LLM instance"""
        return AzureChatOpenAI(
            openai_api_version=self.config.AOAI_API_VERSION,
            azure_deployment=self.config.AOAI_DEPLOY_GPT4O_MINI,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=self.config.AOAI_API_KEY,
            azure_endpoint=self.config.AOAI_ENDPOINT,
            timeout=self.config.AI_TIMEOUT_SECONDS,
            max_retries=self.config.AI_MAX_RETRIES,
        )

    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        if not self.is_configured():
            raise ConfigurationError("AI service not configured")

        prompt = ChatPromptTemplate.from_messages(
            [("system", "{system_prompt}"), ("human", "{user_prompt}")]
        )
        chain = prompt | self._get_llm(temperature, max_tokens) | StrOutputParser()
        try:
            return chain.invoke({"system_prompt": system_prompt, "user_prompt": user_prompt})
        except Exception as e:
            logger.error(f"AI completion failed: {e}")
            raise UpstreamError("AI service request failed") from e

    def _fetch_transcript(self, youtube_url: str) -> Optional[str]:
        video_id = extract_video_id(youtube_url)
        if not video_id:
            return None
        try:
            resp = requests.get(
                self.config.YOUTUBE_TRANSCRIPT_URL,
                params={"v": video_id, "lang": "en"},
                timeout=self.config.AI_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Error fetching transcript for {video_id}: {e}")
            return None
        return resp.text.strip() or None

    def generate_explanation(self, youtube_url: str) -> str:
        """
        Summarize the video's transcript for students.

        Falls back to a fixed text pointing at the video whenever a summary
        cannot be produced.
        """
        if not self.is_configured():
            return fallback_explanation(youtube_url)

        transcript = self._fetch_transcript(youtube_url)
        if not transcript:
            return fallback_explanation(youtube_url)

        user_prompt = (
            "Summarize the following video transcript into a brief, easy-to-understand "
            "explanation for a high school student. Focus on the experiment's objective, "
            f"procedure, and conclusion.\n\nTranscript:\n{transcript}"
        )
        try:
            return self._complete(EXPLANATION_SYSTEM_PROMPT, user_prompt, max_tokens=500)
        except UpstreamError:
            return fallback_explanation(youtube_url)

    def tutor_reply(self, experiment_name: str, explanation: Optional[str], message: str) -> str:
        system_prompt = TUTOR_SYSTEM_PROMPT.format(
            name=experiment_name, explanation=explanation or ""
        )
        return self._complete(system_prompt, message, max_tokens=300)

    def draft_questions(
        self, experiment_name: str, explanation: Optional[str], num_questions: int
    ) -> str:
        """Return the raw model reply; callers must validate it before use"""
        user_prompt = QUESTION_PROMPT.format(
            num_questions=num_questions,
            name=experiment_name,
            explanation=explanation or "",
        )
        return self._complete(QUESTION_SYSTEM_PROMPT, user_prompt, max_tokens=2000)


def get_ai_service() -> AIService:
    return AIService()
