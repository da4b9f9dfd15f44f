"""
LLM prompt construction for digest curation.

Static instructions and the response schema live in the system prompt; the
user prompt carries only the reader's preferences and the candidate list.
"""

from typing import TYPE_CHECKING

from tebpaper.utils.constants import CurationConstants

if TYPE_CHECKING:
    from tebpaper.utils.models import CurationRequest


class LLMPrompts:
    """Prompts for the newspaper-editor curation call"""

    @staticmethod
    def get_curation_system_prompt() -> str:
        return """You are an expert newspaper editor curating a news digest for one reader. Always return valid JSON exactly matching the requested schema and nothing else.

Select the 12-18 most important and interesting articles for this reader's digest. For each selected article, provide:
1. A compelling newspaper-style headline (can differ from the original)
2. A subtitle/deck (one line)
3. A 2-4 paragraph summary written in quality journalistic style
4. An importance score from 1-10 (10 = lead story)
5. Which original article index it corresponds to

Consider the reader's political leaning when:
- Selecting opinion pieces that align with their perspective
- Framing summaries with appropriate context
- Prioritising sources that match their viewpoint for opinion/analysis
- Keep hard news factual regardless of leaning

Format your response as JSON:
{
  "digest_title": "a newspaper masthead subtitle for today, e.g. 'Week in Review: [theme]'",
  "articles": [
    {
      "index": 0,
      "headline": "string",
      "subtitle": "string",
      "summary": "string (2-4 paragraphs)",
      "importance": 8,
      "category": "string"
    }
  ]
}

CRITICAL REQUIREMENTS:
- Return ONLY valid JSON
- No markdown code blocks (no ```json```)
- No explanations before or after the JSON
- Only use indices from the list you were given"""

    @staticmethod
    def format_candidates(request: "CurationRequest") -> str:
        lines = []
        for candidate in request.candidates:
            summary = candidate.summary[:CurationConstants.CANDIDATE_SUMMARY_LENGTH] or "No summary"
            lines.append(
                f'[{candidate.index}] "{candidate.title}" - {candidate.source_name} '
                f'({candidate.category}) | {summary}'
            )
        return "\n".join(lines)

    @staticmethod
    def get_curation_user_prompt(request: "CurationRequest") -> str:
        enabled = ", ".join(
            f"{c.category} (weight: {c.weight}/10)" for c in request.categories if c.enabled
        )
        period = "past 24 hours" if request.frequency == "daily" else "past week"

        return f"""Curate a {request.frequency} news digest.

The reader's political leaning is: {request.reader_leaning}
Their preferred categories (with importance weights): {enabled or "none specified"}
This digest covers the {period}.

Here are the available articles:
{LLMPrompts.format_candidates(request)}"""
