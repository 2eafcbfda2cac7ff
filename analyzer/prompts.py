"""Prompt templates and response schemas sent to the LLM."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Sequence

SEGMENT_DELIMITER = "\n---\n"

ANALYSIS_SCHEMA_VERSION = 1

# Static contract for the analysis response. The pipeline fills in the
# remaining record fields (id, created_date, file_name, total_messages, date_range).
ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "top_topics": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "topic": {"type": "string"},
                    "count": {"type": "number"},
                    "keywords": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
        "sentiment_breakdown": {
            "type": "object",
            "properties": {
                "positive": {"type": "number"},
                "neutral": {"type": "number"},
                "negative": {"type": "number"},
            },
        },
        "key_insights": {
            "type": "array",
            "items": {"type": "string"},
        },
        "improvement_suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "suggestion": {"type": "string"},
                    "priority": {"type": "string"},
                },
            },
        },
        "patterns": {
            "type": "object",
            "properties": {
                "peak_activity_time": {"type": "string"},
                "average_session_length": {"type": "string"},
                "recurring_themes": {"type": "array", "items": {"type": "string"}},
            },
        },
    },
}

ACTION_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "root_cause": {"type": "string"},
        "why_matters": {"type": "string"},
        "action_steps": {"type": "array", "items": {"type": "string"}},
        "quick_wins": {"type": "array", "items": {"type": "string"}},
        "long_term": {"type": "string"},
        "success_metrics": {"type": "array", "items": {"type": "string"}},
    },
}


@dataclass(frozen=True)
class AssembledPrompt:
    """Prompt text together with the response schema the LLM must follow."""

    prompt: str
    response_schema: Dict[str, Any]


_ANALYSIS_TEMPLATE = """You are an expert communication analyst. Analyze this chat history deeply and provide comprehensive, actionable insights.

DATASET INFORMATION:
- Total messages: {total}
- Sample size: {sample_size} messages (evenly distributed across entire history)

SAMPLE MESSAGES:
{contents}

ANALYSIS REQUIREMENTS:

Analyze the conversation patterns, topics, sentiment, and behavioral trends. Return detailed insights in JSON format:

1. **top_topics**: Array of 6-10 most discussed topics
   - Each topic should have: {{topic, count, keywords[]}}
   - Topics should be specific and meaningful (e.g., "Career Development" not just "Work")
   - Include 3-5 relevant keywords per topic that capture the essence of discussions

2. **sentiment_breakdown**: {{positive, neutral, negative}}
   - Percentages that total 100%
   - Reflect the overall emotional tone across conversations

3. **key_insights**: Array of 7-10 deep insights about communication patterns
   - Be specific about what the patterns reveal
   - Focus on behavioral trends, communication style, topics of concern/interest
   - Each insight should be 1-2 sentences, specific and evidence-based

4. **improvement_suggestions**: Array of 8-12 detailed, actionable recommendations
   - Each suggestion must have: {{category, suggestion, priority}}
   - Priority levels: "high", "medium", or "low"
   - Categories should be specific (e.g., "Technical Communication", "Career Planning", "Work-Life Balance", "Learning Strategy")
   - Suggestions must be highly specific, actionable, and grounded in the actual conversation content
   - Each suggestion is 2-3 sentences covering WHAT to do, WHY it matters, and HOW to start
   - Distribute priorities: 3-4 high, 4-6 medium, 2-3 low

5. **patterns**: Behavioral and temporal patterns
   - peak_activity_time: When they're most active (be specific, e.g., "Late evenings 9-11 PM")
   - average_session_length: Estimated typical session duration
   - recurring_themes: Array of 5-8 recurring behavioral or topical themes you notice across conversations

IMPORTANT:
- Be honest and constructive, not generic
- Ground all insights in actual conversation patterns
- Make suggestions specific enough that the user knows exactly what action to take
- Identify both strengths to leverage and areas needing development"""


def assemble_prompt(
    sample_set: Sequence[Any],
    segments: Sequence[str],
    total_message_count: int,
) -> AssembledPrompt:
    """Compose the analysis prompt for a sampled chat history."""
    contents = SEGMENT_DELIMITER.join(segments)
    prompt = _ANALYSIS_TEMPLATE.format(
        total=total_message_count,
        sample_size=len(sample_set),
        contents=contents,
    )
    return AssembledPrompt(prompt=prompt, response_schema=ANALYSIS_RESPONSE_SCHEMA)


_RULE = "=" * 63


def build_action_plan_prompt(record: Mapping[str, Any], suggestion: Mapping[str, Any]) -> str:
    """Compose the coaching prompt that expands one improvement suggestion."""
    patterns = record.get("patterns") or {}
    sentiment = record.get("sentiment_breakdown") or {}

    negative = sentiment.get("negative")
    warning = ""
    if isinstance(negative, (int, float)) and negative > 40:
        warning = "\nWARNING: High negative sentiment detected - indicates challenges or frustrations"

    topic_lines = []
    for index, topic in enumerate((record.get("top_topics") or [])[:8], start=1):
        keywords = ", ".join(str(k) for k in (topic.get("keywords") or [])[:3])
        topic_lines.append(
            f"{index}. {topic.get('topic')} ({topic.get('count')} mentions) - Keywords: {keywords}"
        )
    insight_lines = [
        f"{index}. {insight}" for index, insight in enumerate(record.get("key_insights") or [], start=1)
    ]
    theme_lines = [f"- {theme}" for theme in patterns.get("recurring_themes") or []]

    return f"""You are an expert personal development coach. Based on the user's chat analysis data, create a detailed, comprehensive, and highly actionable growth plan.

{_RULE}
CHAT ANALYSIS CONTEXT
{_RULE}

OVERALL STATISTICS:
- Total Messages Analyzed: {record.get('total_messages')}
- Analysis Period: {record.get('date_range')}
- Peak Activity Time: {patterns.get('peak_activity_time') or 'Unknown'}
- Average Session Length: {patterns.get('average_session_length') or 'Unknown'}

SENTIMENT BREAKDOWN:
- Positive: {sentiment.get('positive')}%
- Neutral: {sentiment.get('neutral')}%
- Negative: {negative}%{warning}

TOP DISCUSSION TOPICS:
{chr(10).join(topic_lines) or 'Not available'}

KEY INSIGHTS FROM ANALYSIS:
{chr(10).join(insight_lines) or 'Not available'}

RECURRING BEHAVIORAL THEMES:
{chr(10).join(theme_lines) or 'Not available'}

{_RULE}
SPECIFIC IMPROVEMENT AREA TO ADDRESS
{_RULE}

Category: {suggestion.get('category')}
Priority Level: {str(suggestion.get('priority') or '').upper()}
Suggestion: {suggestion.get('suggestion')}

{_RULE}
REQUIRED OUTPUT
{_RULE}

Create a comprehensive, personalized action plan that includes:

1. **root_cause** (3-4 sentences): what patterns in their chat history reveal about why this issue exists.
2. **why_matters** (3-4 sentences): the real-world impact of NOT addressing this, tied to their most discussed topics.
3. **quick_wins** (3-4 concrete actions): steps they can take TODAY, each under 30 minutes.
4. **action_steps** (5-7 detailed steps): a progressive plan covering WHAT, HOW and WHEN for each step.
5. **long_term** (4-5 sentences): a strategy for sustained improvement over 3-6 months.
6. **success_metrics** (4-5 indicators): observable, measurable signs of progress.

IMPORTANT GUIDELINES:
- Reference their ACTUAL data - topics, themes, patterns
- No generic advice - everything must be personalized to THEIR analysis
- Write in a supportive coaching tone that acknowledges their strengths
- Consider their peak activity time and session length when suggesting routines"""
