"""Shared test fixtures for the Web Spec Interpreter test suite."""

import pytest

from webspec.models.schemas import StreamChannel
from webspec.services.stream_demux import StreamDemultiplexer


@pytest.fixture
def run_demux():
    """Feed deltas through a fresh demultiplexer; return (events, reasoning, answer)."""

    def _run(deltas, native=None, finish=True):
        demux = StreamDemultiplexer()
        events = []
        for text in native or []:
            events.extend(demux.notify_native_reasoning(text))
        for delta in deltas:
            events.extend(demux.feed(delta))
        if finish:
            events.extend(demux.finish())
        reasoning = "".join(e.text for e in events if e.channel is StreamChannel.REASONING)
        answer = "".join(e.text for e in events if e.channel is StreamChannel.ANSWER)
        return events, reasoning, answer

    return _run


@pytest.fixture
def listed_response():
    """A realistic multi-item response from an enterprise-search agent."""
    return (
        "Here is what I found in your workspace:\n"
        "\n"
        "1. **Sprint Planning - Q2**\n"
        "   - **Type:** Calendar event\n"
        "   - **Date:** 2024-04-02\n"
        "   - Agreed on the Q2 scope and owners.\n"
        "\n"
        "2. **Re: Budget approval**\n"
        "   - Type: Email\n"
        "   - When: 2024-03-28\n"
        "   - Summary: Finance approved the revised budget.\n"
        "\n"
        "---\n"
        "\n"
        "3. [Architecture Overview](https://contoso.sharepoint.com/docs/arch)\n"
        "   Describes the service boundaries.\n"
        "   A second prose line that is not used.\n"
        "\n"
        "- **Jane Doe**\n"
        "  Type: Person\n"
        "  Principal engineer on the platform team.\n"
    )


@pytest.fixture
def search_json():
    """Search-tool output in its JSON form."""
    return (
        '[{"id": "m-1", "type": "meeting", "title": "Weekly sync", '
        '"summary": "Status updates", "date": "2024-05-01", '
        '"url": "https://teams.example.com/m-1"},'
        ' {"type": "Outlook mail", "subject": "Invoice", "snippet": "Please pay"},'
        ' {"description": "No title here"}]'
    )
