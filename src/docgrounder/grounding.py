"""Chat-turn glue between retrieval and an external text-completion service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from docgrounder.index.indexer import KnowledgeBase
from docgrounder.index.search import format_context

LOGGER = logging.getLogger(__name__)

Completer = Callable[[str], str]

NO_INFORMATION_REPLY = "Sorry, I don't have any information about that yet."

PROMPT_TEMPLATE = """You are a workspace assistant. Answer briefly and helpfully, \
using only the information below. If it does not answer the question, say so.

Information:
{context}

Question: {question}
Answer:"""


class CompletionError(RuntimeError):
    """Raised when the text-completion service fails to produce an answer."""


@dataclass(slots=True)
class GroundedAnswer:
    answer: str
    context: str
    grounded: bool


def build_prompt(question: str, context: str) -> str:
    return PROMPT_TEMPLATE.format(context=context, question=question.strip())


class GroundedResponder:
    """Answers questions from retrieved context.

    When retrieval finds nothing relevant the completion service is not
    called and a fixed reply is returned instead.
    """

    def __init__(self, knowledge_base: KnowledgeBase, completer: Completer, *, top_n: int | None = None) -> None:
        self.knowledge_base = knowledge_base
        self.completer = completer
        self.top_n = top_n

    def respond(self, question: str) -> GroundedAnswer:
        results = self.knowledge_base.search(question, top_n=self.top_n)
        context = format_context(results)
        if not results:
            LOGGER.info("No relevant documents for question, skipping completion")
            return GroundedAnswer(answer=NO_INFORMATION_REPLY, context=context, grounded=False)

        prompt = build_prompt(question, context)
        try:
            answer = self.completer(prompt)
        except Exception as exc:
            LOGGER.error("Text completion failed: %s", exc)
            raise CompletionError(str(exc)) from exc
        return GroundedAnswer(answer=answer.strip(), context=context, grounded=True)
