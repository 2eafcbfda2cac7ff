"""Personalised action plans for individual improvement suggestions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from .llm import InvokeLLM, invoke_llm
from .prompts import ACTION_PLAN_SCHEMA, build_action_plan_prompt

LOGGER = logging.getLogger(__name__)


def generate_action_plan(
    record: Mapping[str, Any],
    suggestion: Mapping[str, Any],
    invoke: InvokeLLM = invoke_llm,
) -> Dict[str, Any]:
    """Ask the LLM to expand ``suggestion`` into a plan grounded in ``record``."""
    prompt = build_action_plan_prompt(record, suggestion)
    LOGGER.info(
        "Generating action plan for analysis %s (category=%s)",
        record.get("id"),
        suggestion.get("category"),
    )
    return invoke(prompt, ACTION_PLAN_SCHEMA)


class ActionPlanCache:
    """Keeps generated plans per analysis and suggestion index.

    A failed generation is not cached, so asking again retries the call.
    """

    def __init__(self, invoke: InvokeLLM = invoke_llm) -> None:
        self.invoke = invoke
        self._plans: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def cache_key(analysis_id: Optional[str], index: int) -> str:
        return f"{analysis_id}-{index}"

    def get(self, analysis_id: Optional[str], index: int) -> Optional[Dict[str, Any]]:
        return self._plans.get(self.cache_key(analysis_id, index))

    def get_or_generate(
        self,
        record: Mapping[str, Any],
        index: int,
        suggestion: Mapping[str, Any],
    ) -> Dict[str, Any]:
        key = self.cache_key(record.get("id"), index)
        cached = self._plans.get(key)
        if cached is not None:
            return cached
        plan = generate_action_plan(record, suggestion, self.invoke)
        self._plans[key] = plan
        return plan

    def __len__(self) -> int:
        return len(self._plans)
