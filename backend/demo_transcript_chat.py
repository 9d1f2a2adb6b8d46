"""Demo script for the transcript chat flow against the live backend."""
import sys
sys.path.insert(0, '.')

import asyncio

from config import GROQ_API_KEY, LLM_MODEL
from models.interview import AnalyticsRecord
from services.chat_session import ChatSession
from services.context_formatter import ContextFormatter
from services.query_dispatcher import QueryDispatcher
from services.transcript_qa import TranscriptQAService

TRANSCRIPT = """Agent: Tell me about yourself.
User: I build backend systems, mostly Python services and data pipelines.
Agent: What was the hardest problem you solved recently?
User: We had a queue that fell behind during traffic spikes, so I added batching and backpressure."""

ANALYTICS = {
    "overallScore": 82,
    "overallFeedback": "Solid backend fundamentals.",
    "communication": {"score": 7, "feedback": "clear"},
    "questionSummaries": [
        {"question": "Tell me about yourself.", "summary": "Backend engineer focused on Python services."},
        {"question": "Hardest recent problem?", "summary": "Fixed queue lag with batching and backpressure."},
    ],
}


async def run_demo():
    print("=== Transcript Chat Demo ===\n")

    analytics = AnalyticsRecord.from_dict(ANALYTICS)

    print("1. Formatted context:")
    print(ContextFormatter.format(TRANSCRIPT, analytics))
    print()

    print(f"2. Asking questions with model {LLM_MODEL}...")
    dispatcher = QueryDispatcher(api_key=GROQ_API_KEY)
    session = ChatSession(TranscriptQAService(dispatcher), TRANSCRIPT, "Alex", analytics)

    for question in ["What were the candidate's strengths?", "Did they answer all questions properly?"]:
        await session.submit(question)

    print("✓ Conversation:")
    for message in session.state.all():
        print(f"  [{message.role.value}] {message.content}")


def main():
    """Run the demo."""
    try:
        asyncio.run(run_demo())
    except Exception as e:
        print(f"✗ Error: {e}")
        import traceback
        traceback.print_exc()


if __name__ == "__main__":
    main()
