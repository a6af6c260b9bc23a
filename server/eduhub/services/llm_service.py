"""
Text Generation Service.

Wraps OpenAI chat completions for course descriptions, certificate text and
the study assistant. Every call returns text: on any failure the prompt's
fixed fallback string comes back instead of an exception.
"""
from typing import List, Optional
from openai import AsyncOpenAI

from eduhub.config import settings
from eduhub.services.prompt_management import get_prompt


class TextGenerationService:
    """Service for generating free text from the LLM."""

    def __init__(self, model: Optional[str] = None):
        self.model = model or settings.openai_model
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        # Built lazily so a missing key surfaces as a fallback, not an import error
        if self._client is None:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key)
        return self._client

    async def complete(self, prompt_name: str, history: Optional[List[dict]] = None,
                       user_message: Optional[str] = None, **variables) -> str:
        """
        Run one prompt and return the generated text or its fallback.

        Args:
            prompt_name: YAML prompt file name
            history: Earlier {role, content} turns, oldest first
            user_message: Final user turn; defaults to the rendered human prompt
            **variables: Values for the prompt placeholders
        """
        prompt = get_prompt(prompt_name, **variables)
        fallback = prompt["fallback"]

        messages = []
        if prompt["system_prompt"]:
            messages.append({"role": "system", "content": prompt["system_prompt"]})
        for turn in history or []:
            if turn.get("content"):
                messages.append({"role": turn.get("role", "user"), "content": turn["content"]})
        messages.append({"role": "user", "content": user_message or prompt["human_prompt"]})

        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=prompt["temperature"],
            )
            text = (completion.choices[0].message.content or "").strip()
            return text or fallback
        except Exception as e:
            print(f"❌ AI Generation Error ({prompt_name}): {e}")
            return fallback

    async def generate_course_description(self, course_title: str) -> str:
        return await self.complete("course_description", course_title=course_title)

    async def generate_certificate_content(self, student_name: str, grade_label: str,
                                           certificate_type: str) -> str:
        return await self.complete(
            "certificate",
            student_name=student_name,
            grade_label=grade_label,
            certificate_type=certificate_type,
            teacher_name=settings.teacher_name,
        )

    async def chat(self, message: str, history: Optional[List[dict]] = None) -> str:
        return await self.complete("chat_assistant", history=history, user_message=message)


# Singleton instance
llm_service = TextGenerationService()
