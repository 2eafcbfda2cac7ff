from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

import pandas as pd

PRIORITIES = ("high", "medium", "low")
SENTIMENT_LABELS = (("Positive", "positive"), ("Neutral", "neutral"), ("Negative", "negative"))

DEFAULT_SHARE_TITLE = "Check out my Chat Analysis insights!"
DEFAULT_SHARE_DESCRIPTION = (
    "I analyzed my chat history and discovered amazing insights about my conversation patterns."
)


@dataclass(frozen=True)
class RelatedContent:
    """Parts of an analysis that mention a given topic."""

    insights: List[str] = field(default_factory=list)
    suggestions: List[Dict[str, Any]] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.insights or self.suggestions or self.themes)


def _as_list(value: Any) -> List[Any]:
    """Return ``value`` if it is a list; stored analyses are not validated."""
    return value if isinstance(value, list) else []


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def select_analysis(records: Sequence[Mapping[str, Any]], analysis_id: Optional[str]) -> Optional[Mapping[str, Any]]:
    """Return the analysis with ``analysis_id``, else the newest one, else None."""
    if not records:
        return None
    if analysis_id:
        for record in records:
            if record.get("id") == analysis_id:
                return record
    return records[0]


def analysis_label(record: Mapping[str, Any]) -> str:
    """Short label used in the analysis picker."""
    name = record.get("file_name") or "Untitled upload"
    date_range = record.get("date_range")
    return f"{name} ({date_range})" if date_range else str(name)


def filter_topics(topics: Iterable[Any], term: str) -> List[Mapping[str, Any]]:
    """Topics whose name or any keyword contains ``term`` (case-insensitive)."""
    needle = (term or "").strip().lower()
    matches: List[Mapping[str, Any]] = []
    for topic in topics or []:
        if not isinstance(topic, Mapping):
            continue
        if not needle:
            matches.append(topic)
            continue
        name = str(topic.get("topic") or "").lower()
        keywords = [str(keyword).lower() for keyword in _as_list(topic.get("keywords"))]
        if needle in name or any(needle in keyword for keyword in keywords):
            matches.append(topic)
    return matches


def find_topic(record: Mapping[str, Any], topic_name: str) -> Mapping[str, Any]:
    for topic in _as_list(record.get("top_topics")):
        if isinstance(topic, Mapping) and topic.get("topic") == topic_name:
            return topic
    return {}


def find_related_content(
    record: Mapping[str, Any],
    topic_name: str,
    keywords: Iterable[str] = (),
) -> RelatedContent:
    """Collect insights, suggestions and themes that mention the topic or its keywords."""
    topic_lower = (topic_name or "").lower()
    keywords_lower = [str(keyword).lower() for keyword in keywords if keyword]

    def matches(text: str) -> bool:
        text_lower = text.lower()
        if any(keyword in text_lower for keyword in keywords_lower):
            return True
        return bool(topic_lower) and topic_lower in text_lower

    insights = [
        insight for insight in _as_list(record.get("key_insights"))
        if isinstance(insight, str) and matches(insight)
    ]
    suggestions = [
        suggestion for suggestion in _as_list(record.get("improvement_suggestions"))
        if isinstance(suggestion, Mapping)
        and matches(f"{suggestion.get('category') or ''} {suggestion.get('suggestion') or ''}")
    ]
    patterns = _as_mapping(record.get("patterns"))
    themes = [
        theme for theme in _as_list(patterns.get("recurring_themes"))
        if isinstance(theme, str) and matches(theme)
    ]
    return RelatedContent(insights=insights, suggestions=suggestions, themes=themes)


def group_suggestions_by_priority(suggestions: Iterable[Any]) -> Dict[str, List[Mapping[str, Any]]]:
    """Bucket suggestions by priority; unknown priorities are left out."""
    groups: Dict[str, List[Mapping[str, Any]]] = {priority: [] for priority in PRIORITIES}
    for suggestion in suggestions or []:
        if not isinstance(suggestion, Mapping):
            continue
        priority = str(suggestion.get("priority") or "").lower()
        if priority in groups:
            groups[priority].append(suggestion)
    return groups


def sentiment_frame(record: Mapping[str, Any]) -> pd.DataFrame:
    """Sentiment percentages as a frame; missing or non-numeric values become 0."""
    breakdown = _as_mapping(record.get("sentiment_breakdown"))
    frame = pd.DataFrame(
        {
            "sentiment": [label for label, _ in SENTIMENT_LABELS],
            "value": [breakdown.get(key) for _, key in SENTIMENT_LABELS],
        }
    )
    frame["value"] = pd.to_numeric(frame["value"], errors="coerce").fillna(0.0)
    return frame


def topics_frame(record: Mapping[str, Any]) -> pd.DataFrame:
    """Topic names, mention counts and keywords for charts and tables."""
    rows = []
    for topic in _as_list(record.get("top_topics")):
        if not isinstance(topic, Mapping):
            continue
        rows.append(
            {
                "topic": str(topic.get("topic") or "Untitled"),
                "count": topic.get("count"),
                "keywords": ", ".join(str(k) for k in _as_list(topic.get("keywords"))),
            }
        )
    frame = pd.DataFrame(rows, columns=["topic", "count", "keywords"])
    frame["count"] = pd.to_numeric(frame["count"], errors="coerce").fillna(0)
    return frame


def dashboard_share_description(record: Mapping[str, Any]) -> str:
    topic_count = len(_as_list(record.get("top_topics")))
    return (
        f"I analyzed {record.get('total_messages')} messages and discovered "
        f"{topic_count} key topics in my conversations!"
    )


def topics_share_description(record: Mapping[str, Any]) -> str:
    topics = filter_topics(_as_list(record.get("top_topics")), "")
    top_three = ", ".join(str(topic.get("topic")) for topic in topics[:3])
    return f"I discovered {len(topics)} key topics in my chat history! Top topics: {top_three}"


def insights_share_description(record: Mapping[str, Any]) -> str:
    suggestions = _as_list(record.get("improvement_suggestions"))
    high_priority = group_suggestions_by_priority(suggestions)["high"]
    return (
        f"I got {len(suggestions)} personalized improvement suggestions from my chat analysis, "
        f"including {len(high_priority)} high-priority recommendations!"
    )


def _encode_component(value: str) -> str:
    # Same character set as JavaScript's encodeURIComponent.
    return quote(value, safe="-_.!~*'()")


def build_share_links(
    url: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, str]:
    """Share URLs for the supported social networks."""
    text = f"{title or DEFAULT_SHARE_TITLE} {description or DEFAULT_SHARE_DESCRIPTION}"
    encoded_url = _encode_component(url)
    return {
        "Twitter": f"https://twitter.com/intent/tweet?text={_encode_component(text)}&url={encoded_url}",
        "Facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        "LinkedIn": f"https://www.linkedin.com/sharing/share-offsite/?url={encoded_url}",
    }


def has_accepted_extension(file_name: str, extensions: Iterable[str]) -> bool:
    """True when ``file_name`` ends with one of ``extensions`` (case-insensitive)."""
    lowered = (file_name or "").lower()
    return any(lowered.endswith(f".{extension.lower().lstrip('.')}") for extension in extensions)


def parse_topic_params(params: Mapping[str, Any]) -> Tuple[Optional[str], List[str], Optional[str]]:
    """Read ``topic``, ``keywords`` and ``analysisId`` from page query parameters."""
    topic = params.get("topic") or None
    raw_keywords = params.get("keywords") or ""
    keywords = [keyword for keyword in str(raw_keywords).split(",") if keyword]
    analysis_id = params.get("analysisId") or None
    return topic, keywords, analysis_id
