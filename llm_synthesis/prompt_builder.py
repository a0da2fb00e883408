"""Plain-language prompt builder for district narratives."""

import json
from typing import Any, Dict

_INSTRUCTIONS = """\
You are explaining to a common villager who does NOT know data, government terms, or statistics.
Write the explanation in SIMPLE everyday language, like you are speaking to someone who reads a local newspaper.
Rules:
- Use 5 short sentences (5 lines max).
- No technical words, no jargon, no percentages unless it's simple to say (e.g., "most" instead of "70%").
- Use rupees symbol (₹) when mentioning typical daily wages, and round numbers to the nearest whole number if needed.
- Focus on: how many people got work, whether projects are finishing, how money was spent (like "land and water work"), and whether payments were on time.
- Be friendly and clear (tone: helpful local news).
"""

_DATA_TEMPLATE = """\
Data:
{data}
"""


class NarrativePromptBuilder:
    """Builds the fixed villager-friendly prompt around a district summary."""

    def build_prompt(self, summary: Dict[str, Any]) -> str:
        """Embed ``summary`` as indented JSON under the fixed instructions.

        Args:
            summary: Projected district summary.

        Returns:
            The prompt string sent to every model in the fallback chain.
        """
        data = json.dumps(summary, indent=2, ensure_ascii=False, default=str)
        return "\n".join([_INSTRUCTIONS, _DATA_TEMPLATE.format(data=data)])
