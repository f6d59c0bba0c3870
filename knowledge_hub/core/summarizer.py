"""
Module for summarizing transcripts using LLM models.
"""

import json
import re
from typing import List, Optional, Sequence

from langchain.chat_models import init_chat_model
from langchain_core.documents import Document
from langchain_core.prompts import ChatPromptTemplate
from langchain_text_splitters import RecursiveCharacterTextSplitter
from pydantic import ValidationError

from knowledge_hub.config import config
from knowledge_hub.core.prompts import analysis_template, chunk_template, trend_report_template
from knowledge_hub.models.schemas import SummaryConfig, TranscriptAnalysis, TrendItem
from knowledge_hub.utils.error_handling import SummarizationError
from knowledge_hub.utils.logger import logging

TREND_EXCERPT_CHARS = 1000

RE_CODE_FENCE_START = re.compile(r"^```(?:json)?\s*")
RE_CODE_FENCE_END = re.compile(r"\s*```$")


def parse_analysis(text: str) -> TranscriptAnalysis:
    """
    Parse the model's JSON reply into a TranscriptAnalysis.

    Raises:
        SummarizationError if the reply is not the expected JSON object
    """
    cleaned = RE_CODE_FENCE_END.sub("", RE_CODE_FENCE_START.sub("", text.strip()))
    try:
        return TranscriptAnalysis.model_validate(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError) as e:
        raise SummarizationError(f"AI analysis failed: could not parse model response ({e})") from e


class TranscriptSummarizer:
    """Class to handle transcript analysis and trend reports."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        summary_config: Optional[SummaryConfig] = None,
        llm=None,
    ):
        """
        Initialize the summarizer.

        Args:
            api_key: Groq API key (if None, taken from the configuration)
            summary_config: Model settings (defaults from the configuration)
            llm: Pre-built chat model, mostly for tests
        """
        self.api_key = api_key or config.GROQ_API_KEY
        self.summary_config = summary_config or SummaryConfig(
            model=config.DEFAULT_SUMMARY_MODEL,
            provider=config.SUMMARY_MODEL_PROVIDER,
            max_tokens=config.SUMMARY_MAX_TOKENS,
            chunk_size=config.SUMMARY_CHUNK_SIZE,
            chunk_overlap=config.SUMMARY_CHUNK_OVERLAP,
        )
        self._llm = llm

    @property
    def llm(self):
        if self._llm is None:
            if not self.api_key:
                raise SummarizationError("GROQ_API_KEY environment variable is not set")
            self._llm = init_chat_model(
                model=self.summary_config.model,
                model_provider=self.summary_config.provider,
                temperature=self.summary_config.temperature,
                max_tokens=self.summary_config.max_tokens,
                api_key=self.api_key,
            )
        return self._llm

    async def _complete(self, template: str, **values) -> str:
        prompt = ChatPromptTemplate.from_messages([("human", template)])
        messages = prompt.format_messages(**values)
        try:
            response = await self.llm.ainvoke(messages)
        except SummarizationError:
            raise
        except Exception as e:
            raise SummarizationError(f"Model call failed: {e}") from e
        return response.content if isinstance(response.content, str) else str(response.content)

    async def condense(self, transcript: str) -> str:
        """
        Shrink a long transcript to notes that fit in a single prompt.

        Short transcripts are returned unchanged; longer ones are split into
        chunks, each condensed in turn.
        """
        splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.summary_config.chunk_size,
            chunk_overlap=self.summary_config.chunk_overlap,
        )
        docs = splitter.split_documents([Document(page_content=transcript)])
        if len(docs) <= 1:
            return transcript

        logging.info(f"Condensing transcript in {len(docs)} chunks")
        notes = []
        for doc in docs:
            notes.append(await self._complete(chunk_template, text=doc.page_content))
        return "\n\n".join(notes)

    async def analyze(self, transcript: str, title: str) -> TranscriptAnalysis:
        """
        Produce a structured analysis of one transcript.

        Raises:
            SummarizationError on model failure or an unparsable reply
        """
        text = await self.condense(transcript)
        reply = await self._complete(analysis_template, title=title, transcript=text)
        analysis = parse_analysis(reply)
        logging.info(f"Analyzed transcript: {title}")
        return analysis

    @staticmethod
    def build_trend_context(items: Sequence[TrendItem]) -> str:
        """Date, title and the opening of each transcript, separated by rules."""
        parts: List[str] = []
        for i, item in enumerate(items, start=1):
            excerpt = item.transcript[:TREND_EXCERPT_CHARS]
            parts.append(f"Video {i} ({item.date.date().isoformat()}): {item.title}\n{excerpt}...")
        return "\n\n---\n\n".join(parts)

    async def trend_report(self, items: Sequence[TrendItem]) -> str:
        """
        Write a markdown trend report across several transcripts.

        Raises:
            SummarizationError on model failure
        """
        report = await self._complete(trend_report_template, context=self.build_trend_context(items))
        logging.info(f"Generated trend report from {len(items)} transcripts")
        return report
