#!/usr/bin/env python3
"""
Seed & Validation AI Adapter
============================
The NameAI capability supplies seed words, a 0-1 quality score for a
candidate, free text (taglines) and invented names.

Two strategies:
- AnthropicNameAI: Claude via the anthropic SDK, JSON-formatted prompts
- LocalNameAI: deterministic offline fallback built on the pattern bank
  and the heuristic scorer

Every failure of the live strategy is raised as AdapterUnavailable; the
pipeline decides how to degrade.

Usage:
    from namekit.adapters.ai import get_name_ai

    ai = get_name_ai()
    seeds = ai.seed_words("project management for remote teams", "projectManagement")
    verdict = ai.validate("TaskBloom", "project management")
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Sequence

import anthropic

from namekit.config import Config, config as get_default_config
from namekit.errors import AdapterUnavailable
from namekit.generators.patterns import PatternBank, load_pattern_bank
from namekit.models import Validation, clean_word
from namekit.scoring import NameScorer
from namekit.settings import get_setting

logger = logging.getLogger(__name__)


class CreativeName(NamedTuple):
    """An invented name proposed by the AI, with its meaning."""
    name: str
    meaning: Optional[str] = None


def normalize_score(value) -> float:
    """Map a 0-1 or 0-100 score onto 0-1."""
    score = float(value)
    if score > 1.0:
        score /= 100.0
    return min(1.0, max(0.0, score))


def _split_words(values: Sequence) -> List[str]:
    """Flatten phrases like 'task board' into single clean words."""
    words = []
    for value in values or ():
        for token in str(value).split():
            word = clean_word(token)
            if len(word) >= 3 and not word.isdigit():
                words.append(word)
    return list(dict.fromkeys(words))


# =============================================================================
# Capability
# =============================================================================

class NameAI(ABC):
    """AI text service used for seed words, validation and taglines."""

    name = "ai"

    @abstractmethod
    def seed_words(self, concept: str, category: Optional[str] = None) -> List[str]:
        """Context-aware vocabulary for a concept (lower-case single words)."""

    @abstractmethod
    def validate(self, name: str, concept: Optional[str] = None) -> Validation:
        """Quality/fit verdict for a candidate, score in 0..1."""

    @abstractmethod
    def generate_text(self, prompt: str) -> str:
        """Free text for a prompt; empty means no text."""

    @abstractmethod
    def creative_names(self, concept: str, count: int, style: str) -> List[CreativeName]:
        """Invented names with no deterministic derivation."""


# =============================================================================
# Live strategy (Anthropic)
# =============================================================================

class AnthropicNameAI(NameAI):
    """
    NameAI backed by Claude.

    Usage:
        ai = AnthropicNameAI(api_key="sk-...")
        ai.validate("Trackr", "issue tracking")
    """

    name = "anthropic"

    def __init__(self,
                 api_key: Optional[str] = None,
                 model: Optional[str] = None,
                 max_tokens: Optional[int] = None,
                 timeout: Optional[float] = None,
                 client=None):
        cfg = get_setting("ai", {}) or {}
        self.model = model or cfg.get("model")
        self.max_tokens = max_tokens or cfg.get("max_tokens")
        self.timeout = timeout or cfg.get("request_timeout")
        self.seed_word_limit = cfg.get("seed_word_limit")
        if not self.model or not self.max_tokens or not self.timeout or not self.seed_word_limit:
            raise ValueError("ai settings (model, max_tokens, request_timeout, seed_word_limit) "
                             "must be set in app.yaml")
        if client is None:
            if not api_key:
                raise AdapterUnavailable(self.name, "ANTHROPIC_API_KEY is not set")
            client = anthropic.Anthropic(api_key=api_key)
        self.client = client

    def _complete(self, prompt: str) -> str:
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "user", "content": prompt}
                ],
                timeout=self.timeout,
            )
            return message.content[0].text.strip()
        except Exception as e:
            raise AdapterUnavailable(self.name, str(e)) from e

    def _complete_json(self, prompt: str):
        text = self._complete(prompt + "\n\nRespond with JSON only, no commentary.")
        match = re.search(r'[\[{].*[\]}]', text, re.DOTALL)
        if not match:
            raise AdapterUnavailable(self.name, "response contained no JSON")
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise AdapterUnavailable(self.name, f"invalid JSON: {e}") from e

    def seed_words(self, concept: str, category: Optional[str] = None) -> List[str]:
        context = f" in the {category} space" if category else ""
        data = self._complete_json(
            f'Generate seed words for naming a startup{context}: "{concept}".\n'
            'Return an object with the keys "core" (core concept words), '
            '"related" (related concepts and synonyms), "emotional" '
            '(aspirational words), "action" (action verbs) and "modifiers" '
            '(descriptive adjectives). Each value is a list of single words.'
        )
        if not isinstance(data, dict):
            raise AdapterUnavailable(self.name, "seed words response is not an object")
        words = _split_words([
            *(data.get("core") or []),
            *(data.get("related") or [])[:5],
            *(data.get("action") or [])[:5],
            *(data.get("modifiers") or [])[:5],
        ])
        return words[:self.seed_word_limit]

    def validate(self, name: str, concept: Optional[str] = None) -> Validation:
        context = f' for "{concept}"' if concept else ""
        data = self._complete_json(
            f'Validate "{name}" as a startup or product name{context}.\n'
            'Judge pronounceability, memorability, distinctiveness and fit. '
            'Return an object with "score" (0-100 number) and "reasoning" '
            '(one sentence).'
        )
        if not isinstance(data, dict) or "score" not in data:
            raise AdapterUnavailable(self.name, "validation response has no score")
        try:
            score = normalize_score(data["score"])
        except (TypeError, ValueError) as e:
            raise AdapterUnavailable(self.name, f"bad score {data['score']!r}") from e
        reasoning = data.get("reasoning")
        return Validation(score=score, reasoning=str(reasoning).strip() if reasoning else None)

    def generate_text(self, prompt: str) -> str:
        return self._complete(prompt).strip().strip('"')

    def creative_names(self, concept: str, count: int, style: str) -> List[CreativeName]:
        if count <= 0:
            return []
        data = self._complete_json(
            f'Generate {count} creative {style} startup names for: "{concept}".\n'
            'Invent new words; do not combine dictionary words. Return a list of '
            'objects with "name" and "meaning".'
        )
        if isinstance(data, dict):
            data = data.get("names") or []
        names = []
        for item in data if isinstance(data, list) else []:
            if isinstance(item, dict):
                raw, meaning = item.get("name"), item.get("meaning")
            else:
                raw, meaning = item, None
            name = re.sub(r'[^A-Za-z0-9]', '', str(raw or ''))
            if len(name) >= 3:
                names.append(CreativeName(name, meaning))
        return names[:count]


# =============================================================================
# Local strategy (deterministic)
# =============================================================================

class LocalNameAI(NameAI):
    """
    Offline NameAI: no network, same output for the same input.

    Seed words come from the concept itself plus category words, validation
    from the heuristic scorer, invented names from concept syllables. It
    produces no free text, so callers fall back to their own templates.
    """

    name = "local"

    def __init__(self, bank: Optional[PatternBank] = None, scorer: Optional[NameScorer] = None):
        self.bank = bank or load_pattern_bank()
        self.scorer = scorer or NameScorer(self.bank)

    def _concept_words(self, concept: Optional[str]) -> List[str]:
        tokens = _split_words(re.findall(r"[A-Za-z0-9]+", concept or ""))
        return [t for t in tokens if not self.bank.is_stop_word(t)]

    def seed_words(self, concept: str, category: Optional[str] = None) -> List[str]:
        words = self._concept_words(concept)
        if category and self.bank.has_category(category):
            words.extend(self.bank.words(category)[:5])
        return list(dict.fromkeys(words))

    def validate(self, name: str, concept: Optional[str] = None) -> Validation:
        result = self.scorer.analyze(name)
        if result.issues:
            reasoning = "; ".join(result.issues)
        else:
            reasoning = "Easy to say, reasonable length"
        return Validation(score=result.total, reasoning=reasoning)

    def generate_text(self, prompt: str) -> str:
        return ""

    def creative_names(self, concept: str, count: int, style: str) -> List[CreativeName]:
        syllables = []
        for word in self._concept_words(concept):
            match = re.match(r'[^aeiou]*[aeiou]+[^aeiou]?', word)
            if match and len(match.group(0)) >= 2:
                syllables.append(match.group(0))
        syllables = list(dict.fromkeys(syllables))

        names = []
        seen = set()
        for i, first in enumerate(syllables):
            for second in syllables[i + 1:] + syllables[:i]:
                name = (first + second).capitalize()
                if len(name) < 4 or name.lower() in seen:
                    continue
                seen.add(name.lower())
                names.append(CreativeName(name, f"Blend of '{first}' and '{second}'"))
                if len(names) >= count:
                    return names
        return names


# =============================================================================
# Factory
# =============================================================================

def get_name_ai(config: Optional[Config] = None,
                offline: bool = False,
                bank: Optional[PatternBank] = None) -> NameAI:
    """
    Pick the live provider when an Anthropic key is configured,
    otherwise the local one.
    """
    config = config or get_default_config()
    if not offline and config.has_anthropic:
        logger.debug(f"Using Anthropic model {config.anthropic_model}")
        return AnthropicNameAI(api_key=config.anthropic_api_key, model=config.anthropic_model)
    logger.debug("Using local name AI")
    return LocalNameAI(bank)


__all__ = [
    'CreativeName',
    'NameAI',
    'AnthropicNameAI',
    'LocalNameAI',
    'get_name_ai',
    'normalize_score',
]
