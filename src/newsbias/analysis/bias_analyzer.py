"""Keyword-driven bias, sentiment and credibility scoring."""

import math
import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from pydantic import ValidationError

from newsbias.core.article import (
    AnalysisResult,
    BiasIndicator,
    BiasScore,
    CredibilityMetrics,
    KeyPhrases,
    SentimentBreakdown,
)
from newsbias.core.config import KeywordTables
from newsbias.core.enums import BiasLean, Impact
from newsbias.services.source_registry import DEFAULT_RELIABILITY, SourceRegistry
from newsbias.utils.exceptions import AnalysisError
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import count_words

logger = get_logger(__name__)

LEAN_PRIORS = {
    BiasLean.LEFT: 25,
    BiasLean.RIGHT: 75,
    BiasLean.CENTER_RIGHT: 60,
    BiasLean.CENTER: 50,
}
PARTY_TILT = 15
PARTY_DOMINANCE_RATIO = 1.5

NUMBER_PATTERN = re.compile(r"\d+")
QUOTE_PATTERN = re.compile(r"[\"'“”]")

MAX_KEY_PHRASES = 5
MAX_EXAMPLES = 3
PHRASE_WINDOW_WORDS = 6


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, _round_half_up(value)))


def _term_pattern(terms: Iterable[str]) -> Optional[Pattern]:
    """Case-insensitive word-boundary alternation, longest terms first."""
    unique = sorted({t.strip().lower() for t in terms if t.strip()}, key=len, reverse=True)
    if not unique:
        return None
    return re.compile(r"(?<!\w)(?:" + "|".join(re.escape(t) for t in unique) + r")(?!\w)", re.IGNORECASE)


class Lexicon:
    """A keyword list with a compiled pattern per term."""

    def __init__(self, terms: Sequence[str]):
        self.terms = [t.strip().lower() for t in terms if t.strip()]
        self._patterns = [(t, _term_pattern([t])) for t in self.terms]

    def count(self, text: str) -> int:
        """Total word-boundary matches of every term in text."""
        return sum(len(pattern.findall(text)) for _, pattern in self._patterns)

    def matches(self, text: str) -> List[Tuple[str, re.Match]]:
        """First match of each term present in text, in lexicon order."""
        found = []
        for term, pattern in self._patterns:
            match = pattern.search(text)
            if match:
                found.append((term, match))
        return found

    def examples(self, text: str, limit: int = MAX_EXAMPLES) -> List[str]:
        """Up to limit matched substrings, in order of appearance."""
        hits = sorted(self.matches(text), key=lambda hit: hit[1].start())
        return [match.group(0) for _, match in hits[:limit]]


def largest_remainder(counts: Sequence[int], total: int = 100) -> List[int]:
    """Apportion total across counts so the shares sum exactly to total.

    Ties in the fractional remainder go to the earlier position.
    """
    count_sum = sum(counts)
    if count_sum == 0:
        return [0] * len(counts)

    raw = [c * total / count_sum for c in counts]
    floors = [math.floor(r) for r in raw]
    leftover = total - sum(floors)
    order = sorted(range(len(counts)), key=lambda i: (-(raw[i] - floors[i]), i))
    for i in order[:leftover]:
        floors[i] += 1
    return floors


class BiasAnalyzer:
    """Deterministic heuristic scoring of an article's language.

    All signals are keyword or pattern counts over the lowercased
    ``title + " " + body`` text, normalized by total word count. Source
    priors (lean, reliability) come from the source registry; unknown
    sources get a center lean and a reliability of 70.
    """

    def __init__(self, keywords: KeywordTables, registry: Optional[SourceRegistry] = None):
        self.keywords = keywords
        self.registry = registry

        self.positive = Lexicon(keywords.sentiment.positive)
        self.negative = Lexicon(keywords.sentiment.negative)
        self.neutral = Lexicon(keywords.sentiment.neutral)
        self.emotional = Lexicon(keywords.sentiment.positive + keywords.sentiment.negative)
        self.factual_phrases = Lexicon(keywords.factual_phrases)
        self.attributions = Lexicon(keywords.source_attributions)
        self.balance_markers = Lexicon(keywords.balance_markers)
        self.parties: Dict[str, Lexicon] = {party: Lexicon(terms) for party, terms in keywords.political.items()}

        self._highlight_classes: Dict[str, str] = {}
        for term in self.positive.terms:
            self._highlight_classes.setdefault(term, "bias-positive")
        for term in self.negative.terms:
            self._highlight_classes.setdefault(term, "bias-negative")
        for lexicon in self.parties.values():
            for term in lexicon.terms:
                self._highlight_classes.setdefault(term, "bias-political")
        self._highlight_pattern = _term_pattern(self._highlight_classes)

    def analyze(self, title: str, body: str, source_name: str) -> AnalysisResult:
        """Score one article.

        Args:
            title: Article title
            body: Article body text
            source_name: Publisher display name, used for priors

        Returns:
            AnalysisResult with scores, sentiment, key phrases,
            indicators, credibility and highlighted body

        Raises:
            AnalysisError: If the computed result fails validation
        """
        text = f"{title} {body}".lower()
        total_words = max(count_words(text), 1)

        try:
            result = AnalysisResult(
                bias_score=self.bias_score(text, total_words, source_name),
                sentiment=self.sentiment(text),
                key_phrases=self.key_phrases(text),
                bias_indicators=self.indicators(text, body, total_words),
                credibility=self.credibility(body, source_name),
                highlighted_body=self.highlight(body),
            )
        except ValidationError as e:
            logger.error("analysis_validation_failed", source=source_name, error=str(e))
            raise AnalysisError(f"Invalid analysis result for {source_name}: {e}") from e

        logger.debug(
            "article_analyzed",
            source=source_name,
            overall=result.bias_score.overall,
            emotional=result.bias_score.emotional,
            indicators=len(result.bias_indicators),
        )
        return result

    def _bias_prior(self, source_name: str) -> int:
        lean = self.registry.bias_prior_for(source_name) if self.registry else BiasLean.CENTER
        return LEAN_PRIORS.get(lean, 50)

    def _reliability_prior(self, source_name: str) -> int:
        return self.registry.reliability_for(source_name) if self.registry else DEFAULT_RELIABILITY

    def party_counts(self, text: str) -> Tuple[int, int]:
        """BJP and Congress keyword counts."""
        return self.parties["bjp"].count(text), self.parties["congress"].count(text)

    def bias_score(self, text: str, total_words: int, source_name: str) -> BiasScore:
        overall = self._bias_prior(source_name)
        bjp, congress = self.party_counts(text)
        if bjp > congress * PARTY_DOMINANCE_RATIO:
            overall += PARTY_TILT
        elif congress > bjp * PARTY_DOMINANCE_RATIO:
            overall -= PARTY_TILT

        emotional = self.emotional.count(text) / total_words * 1000

        factual_hits = (
            len(NUMBER_PATTERN.findall(text))
            + len(QUOTE_PATTERN.findall(text))
            + self.factual_phrases.count(text)
        )
        factual = factual_hits / total_words * 500

        balanced = self.balance_markers.count(text) / total_words * 1000

        return BiasScore(
            overall=_clamp(overall),
            emotional=_clamp(min(emotional, 100)),
            factual=_clamp(min(factual, 100)),
            balanced=_clamp(min(balanced, 100)),
        )

    def sentiment(self, text: str) -> SentimentBreakdown:
        """Positive/neutral/negative shares summing to 100."""
        counts = [self.positive.count(text), self.neutral.count(text), self.negative.count(text)]
        if sum(counts) == 0:
            return SentimentBreakdown(positive=0, neutral=100, negative=0)

        positive, neutral, negative = largest_remainder(counts)
        return SentimentBreakdown(positive=positive, neutral=neutral, negative=negative)

    def key_phrases(self, text: str) -> KeyPhrases:
        tokens = [(m.start(), m.end()) for m in re.finditer(r"\S+", text)]
        return KeyPhrases(
            positive=self._phrases(self.positive, text, tokens),
            negative=self._phrases(self.negative, text, tokens),
            neutral=self._phrases(self.neutral, text, tokens),
        )

    def _phrases(self, lexicon: Lexicon, text: str, tokens: List[Tuple[int, int]]) -> List[str]:
        phrases: List[str] = []
        for _, match in lexicon.matches(text):
            phrase = self._window(text, tokens, match)
            if phrase and phrase not in phrases:
                phrases.append(phrase)
            if len(phrases) >= MAX_KEY_PHRASES:
                break
        return phrases

    @staticmethod
    def _window(text: str, tokens: List[Tuple[int, int]], match: re.Match) -> str:
        """About six whitespace-delimited words centered on a match."""
        first = next(i for i, (_, end) in enumerate(tokens) if end > match.start())
        last = next(i for i, (_, end) in enumerate(tokens) if end >= match.end())
        width = max(last - first + 1, PHRASE_WINDOW_WORDS)

        start = max(first - (width - (last - first + 1)) // 2, 0)
        end = min(start + width, len(tokens))
        start = max(end - width, 0)

        return " ".join(text[s:e] for s, e in tokens[start:end])

    def indicators(self, text: str, body: str, total_words: int) -> List[BiasIndicator]:
        """Structured findings, each rule firing independently."""
        body_lower = body.lower()
        found: List[BiasIndicator] = []

        emotional_ratio = self.emotional.count(text) / total_words
        if emotional_ratio > 0.05:
            found.append(
                BiasIndicator(
                    type="Loaded Language",
                    description="Uses emotionally charged words that may influence reader perception",
                    examples=self.emotional.examples(text),
                    impact=Impact.HIGH if emotional_ratio > 0.10 else Impact.MEDIUM,
                )
            )

        attribution_count = self.attributions.count(body_lower)
        if attribution_count < 2 and len(body) > 500:
            found.append(
                BiasIndicator(
                    type="Limited Source Diversity",
                    description="Article relies on few attributed sources, limiting the range of perspectives",
                    examples=self.attributions.examples(body_lower),
                    impact=Impact.MEDIUM,
                )
            )

        bjp, congress = self.party_counts(text)
        if abs(bjp - congress) > 3:
            dominant = self.parties["bjp"] if bjp > congress else self.parties["congress"]
            found.append(
                BiasIndicator(
                    type="Political Framing",
                    description="Disproportionate focus on one political perspective",
                    examples=dominant.examples(text),
                    impact=Impact.HIGH,
                )
            )

        numbers = NUMBER_PATTERN.findall(text)
        factual_ratio = (len(numbers) + self.factual_phrases.count(body_lower)) / total_words
        factual_examples = (self.factual_phrases.examples(body_lower) + numbers)[:MAX_EXAMPLES]
        if factual_ratio > 0.05:
            found.append(
                BiasIndicator(
                    type="High Factual Content",
                    description="Contains substantial factual elements such as figures and attributed data",
                    examples=factual_examples,
                    impact=Impact.LOW,
                )
            )
        elif factual_ratio < 0.02:
            found.append(
                BiasIndicator(
                    type="Limited Factual Content",
                    description="Has few factual indicators such as statistics, quotes or data references",
                    examples=factual_examples,
                    impact=Impact.MEDIUM,
                )
            )

        return found

    def credibility(self, body: str, source_name: str) -> CredibilityMetrics:
        prior = self._reliability_prior(source_name)
        body_lower = body.lower()

        factual_hits = len(NUMBER_PATTERN.findall(body_lower)) + self.factual_phrases.count(body_lower)
        attributions = self.attributions.count(body_lower)

        return CredibilityMetrics(
            source_reliability=_clamp(prior),
            fact_checking=_clamp(prior + 2 * factual_hits),
            transparency=_clamp(prior + 3 * attributions),
            author_expertise=_clamp(prior - 5),
        )

    def highlight(self, body: str) -> str:
        """Wrap every lexicon match in a category-tagged <mark> in one pass."""
        if self._highlight_pattern is None:
            return body

        def wrap(match: re.Match) -> str:
            css_class = self._highlight_classes[match.group(0).lower()]
            return f'<mark class="{css_class}">{match.group(0)}</mark>'

        return self._highlight_pattern.sub(wrap, body)
