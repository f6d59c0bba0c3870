"""
Tests for the transcript summarizer module.
"""

import asyncio
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from knowledge_hub.core.summarizer import TranscriptSummarizer, parse_analysis
from knowledge_hub.models.schemas import SummaryConfig, TrendItem
from knowledge_hub.utils.error_handling import SummarizationError

ANALYSIS_JSON = json.dumps({
    "summary": "A look at agent frameworks.",
    "key_topics": ["agents", "tooling"],
    "main_insights": ["Agents are getting cheaper"],
    "industry_trends": ["Open models catching up"],
})


def reply(content):
    response = MagicMock()
    response.content = content
    return response


@pytest.fixture
def mock_llm():
    """Chat model double whose ainvoke returns the analysis JSON."""
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=reply(ANALYSIS_JSON))
    return llm


@pytest.fixture
def summary_config():
    """Fixture to create a SummaryConfig object."""
    return SummaryConfig(model="llama-3.3-70b-versatile", chunk_size=200, chunk_overlap=20)


def test_init_summarizer():
    """Test initializing the summarizer."""
    summarizer = TranscriptSummarizer(api_key="test_api_key")
    assert summarizer.api_key == "test_api_key"
    assert summarizer.summary_config.provider == "groq"


def test_missing_api_key_raises():
    summarizer = TranscriptSummarizer()
    summarizer.api_key = None
    with pytest.raises(SummarizationError):
        summarizer.llm


def test_llm_built_with_groq():
    with patch("knowledge_hub.core.summarizer.init_chat_model") as mock_init_model:
        summarizer = TranscriptSummarizer(api_key="test_api_key")
        assert summarizer.llm is mock_init_model.return_value

    kwargs = mock_init_model.call_args.kwargs
    assert kwargs["model_provider"] == "groq"
    assert kwargs["api_key"] == "test_api_key"


def test_analyze_short_transcript(mock_llm, summary_config):
    """Test analyzing a short transcript (single chunk)."""
    summarizer = TranscriptSummarizer(api_key="k", summary_config=summary_config, llm=mock_llm)

    analysis = asyncio.run(summarizer.analyze("Agents are everywhere.", "Agents Weekly"))

    mock_llm.ainvoke.assert_awaited_once()
    prompt = mock_llm.ainvoke.call_args.args[0][0].content
    assert "Video Title: Agents Weekly" in prompt
    assert "Agents are everywhere." in prompt
    assert analysis.summary == "A look at agent frameworks."
    assert analysis.key_topics == ["agents", "tooling"]
    assert analysis.industry_trends == ["Open models catching up"]


def test_analyze_long_transcript_condenses_chunks(mock_llm, summary_config):
    """Long transcripts are condensed chunk by chunk before analysis."""
    mock_llm.ainvoke = AsyncMock(side_effect=[reply("notes one"), reply("notes two"), reply(ANALYSIS_JSON)])
    summarizer = TranscriptSummarizer(api_key="k", summary_config=summary_config, llm=mock_llm)

    with patch("knowledge_hub.core.summarizer.RecursiveCharacterTextSplitter.split_documents") as mock_split:
        from langchain_core.documents import Document
        mock_split.return_value = [Document(page_content="part one"), Document(page_content="part two")]
        analysis = asyncio.run(summarizer.analyze("a very long transcript " * 50, "Long One"))

    assert mock_llm.ainvoke.await_count == 3
    final_prompt = mock_llm.ainvoke.call_args.args[0][0].content
    assert "notes one\n\nnotes two" in final_prompt
    assert analysis.summary == "A look at agent frameworks."


def test_parse_analysis_accepts_fences_and_camel_case():
    text = '```json\n{"summary": "s", "keyTopics": ["t"], "mainInsights": ["i"]}\n```'
    analysis = parse_analysis(text)
    assert analysis.key_topics == ["t"]
    assert analysis.main_insights == ["i"]
    assert analysis.industry_trends is None


def test_parse_analysis_rejects_bad_json():
    with pytest.raises(SummarizationError):
        parse_analysis("Sure! Here is the analysis: summary...")
    with pytest.raises(SummarizationError):
        parse_analysis('{"key_topics": []}')


def test_model_failure_is_wrapped(mock_llm):
    mock_llm.ainvoke = AsyncMock(side_effect=RuntimeError("upstream 503"))
    summarizer = TranscriptSummarizer(api_key="k", llm=mock_llm)

    with pytest.raises(SummarizationError, match="upstream 503"):
        asyncio.run(summarizer.analyze("text", "title"))


def test_build_trend_context_truncates():
    items = [
        TrendItem(title="First", transcript="x" * 1500, date=datetime(2025, 6, 1, tzinfo=timezone.utc)),
        TrendItem(title="Second", transcript="short", date=datetime(2025, 6, 2, tzinfo=timezone.utc)),
    ]

    context = TranscriptSummarizer.build_trend_context(items)

    first, second = context.split("\n\n---\n\n")
    assert first == "Video 1 (2025-06-01): First\n" + "x" * 1000 + "..."
    assert second == "Video 2 (2025-06-02): Second\nshort..."


def test_trend_report(mock_llm):
    mock_llm.ainvoke = AsyncMock(return_value=reply("# Trend Report\n\nAgents dominate."))
    summarizer = TranscriptSummarizer(api_key="k", llm=mock_llm)
    items = [TrendItem(title="Only", transcript="agents", date=datetime(2025, 6, 1, tzinfo=timezone.utc))]

    report = asyncio.run(summarizer.trend_report(items))

    assert report.startswith("# Trend Report")
    assert "Video 1 (2025-06-01): Only" in mock_llm.ainvoke.call_args.args[0][0].content
