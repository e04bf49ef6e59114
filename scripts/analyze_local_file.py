#!/usr/bin/env python3
"""Utility script to run the analysis pipeline on a local transcript file.

This script:
1. Reads the transcript file given on the command line
2. Analyses it with the real OpenAI API and stores it in DATABASE_URL
3. Saves a Markdown report next to the input as <name>.analysis.md
"""
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add parent directory to path to import services
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.analysis_client import AnalysisClient
from services.analysis_service import TranscriptAnalysisService
from services.analysis_store import AnalysisStore
from services.database import close_engine, init_db
from services.errors import AnalyzerError


async def main():
    """Main execution function."""
    if len(sys.argv) < 2:
        print("Usage: python scripts/analyze_local_file.py <TRANSCRIPT_FILE>")
        sys.exit(1)

    input_file = Path(sys.argv[1])
    output_file = input_file.with_suffix(".analysis.md")

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}")
        sys.exit(1)

    print(f"Reading transcript from: {input_file}")
    transcript = input_file.read_text(encoding="utf-8")
    print(f"Transcript length: {len(transcript)} characters")

    await init_db()
    service = TranscriptAnalysisService(AnalysisClient(), AnalysisStore())

    try:
        print("Analysing with OpenAI...")
        result = await service.analyze_transcript(transcript, request_id="local-file")
    except AnalyzerError as e:
        print(f"Error analysing transcript ({e.kind.value}): {e.message}")
        if e.details:
            print(f"Details: {e.details}")
        sys.exit(1)
    finally:
        await close_engine()

    print("✓ Analysis complete!")

    markdown_output = f"""# Meeting Analysis

Analysis ID: `{result.id}`
Created: {result.created_at}

## Sentiment

**{result.sentiment}**

{result.sentiment_summary or ""}

## Action Items

"""
    if result.action_items:
        for i, item in enumerate(result.action_items, 1):
            owner = item.owner or "Unassigned"
            deadline = f", due {item.deadline}" if item.deadline else ""
            priority = f" [{item.priority.value}]" if item.priority else ""
            markdown_output += f"{i}. {item.description} ({owner}{deadline}){priority}\n"
    else:
        markdown_output += "*No action items identified*\n"

    markdown_output += "\n## Decisions\n\n"
    if result.decisions:
        for i, decision in enumerate(result.decisions, 1):
            context = f" - {decision.context}" if decision.context else ""
            markdown_output += f"{i}. [{decision.type.value}] {decision.description}{context}\n"
    else:
        markdown_output += "*No decisions identified*\n"

    output_file.write_text(markdown_output, encoding="utf-8")

    print(f"✓ Results saved to: {output_file}")
    print(f"Sentiment: {result.sentiment}")
    print(f"Action items found: {len(result.action_items)}")
    print(f"Decisions found: {len(result.decisions)}")


if __name__ == "__main__":
    asyncio.run(main())
