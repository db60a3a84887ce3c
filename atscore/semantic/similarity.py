from __future__ import annotations

import asyncio
import hashlib
import logging
import math
import re
from typing import Literal, Protocol

from pydantic import BaseModel, Field

from atscore.core.config.scoring import get_scoring_value

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"[a-z0-9\+#]+(?:\.[a-z0-9]+)*")
_STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "in", "is", "it",
        "of", "on", "or", "our", "that", "the", "this", "to", "we", "will", "with", "you", "your",
    }
)

SemanticStatus = Literal["ok", "timeout", "error", "skipped"]


class EmbeddingProvider(Protocol):
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Return vector embeddings for input texts."""


class HashingEmbeddingProvider:
    """Deterministic bag-of-features embedding built from hashed unigrams and bigrams."""

    def __init__(self, dimension: int = 64, *, include_bigrams: bool = True) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be greater than 0")
        self.dimension = dimension
        self.include_bigrams = include_bigrams

    def embed(self, texts: list[str]) -> list[list[float]]:
        return [self._embed_single(text) for text in texts]

    def _features(self, text: str) -> list[str]:
        tokens = [token for token in _TOKEN_PATTERN.findall((text or "").lower()) if token not in _STOPWORDS]
        if not self.include_bigrams:
            return tokens
        return tokens + [f"{left} {right}" for left, right in zip(tokens, tokens[1:])]

    def _embed_single(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for feature in self._features(text):
            digest = hashlib.sha256(feature.encode("utf-8")).hexdigest()
            vector[int(digest[:8], 16) % self.dimension] += 1.0

        norm = math.sqrt(sum(value * value for value in vector))
        if norm <= 0:
            return vector
        return [value / norm for value in vector]


def cosine_similarity(left: list[float], right: list[float]) -> float:
    if not left or len(left) != len(right):
        return 0.0
    dot = sum(a * b for a, b in zip(left, right))
    left_norm = math.sqrt(sum(a * a for a in left))
    right_norm = math.sqrt(sum(b * b for b in right))
    if left_norm <= 0 or right_norm <= 0:
        return 0.0
    similarity = dot / (left_norm * right_norm)
    return similarity if math.isfinite(similarity) else 0.0


class SemanticSignal(BaseModel):
    score: float | None = Field(default=None, ge=0.0, le=1.0)
    status: SemanticStatus = "skipped"
    matched_keywords: list[str] = Field(default_factory=list)
    detail: str = ""

    @property
    def available(self) -> bool:
        return self.status == "ok" and self.score is not None


def blend_match_scores(semantic: float, literal: float) -> float:
    """Blend semantic (0..1) and literal (0..1) match into one 0..1 figure."""
    semantic_weight = float(get_scoring_value("semantic.semantic_weight", 0.6))
    literal_weight = float(get_scoring_value("semantic.literal_weight", 0.4))
    total = semantic_weight + literal_weight
    if total <= 0:
        return 0.0
    blended = (semantic * semantic_weight + literal * literal_weight) / total
    return max(0.0, min(1.0, blended)) if math.isfinite(blended) else 0.0


def _score_vectors(
    vectors: list[list[float]],
    keywords: list[str],
    sentence_count: int,
    threshold: float,
) -> SemanticSignal:
    expected = 2 + len(keywords) + sentence_count
    if len(vectors) != expected:
        raise ValueError(f"embedding provider returned {len(vectors)} vectors, expected {expected}")
    resume_vec, jd_vec = vectors[0], vectors[1]
    keyword_vecs = vectors[2 : 2 + len(keywords)]
    sentence_vecs = vectors[2 + len(keywords) :]
    matched = [
        keyword
        for keyword, keyword_vec in zip(keywords, keyword_vecs)
        if any(cosine_similarity(keyword_vec, sentence_vec) >= threshold for sentence_vec in sentence_vecs)
    ]
    score = max(0.0, min(1.0, cosine_similarity(resume_vec, jd_vec)))
    return SemanticSignal(score=round(score, 4), status="ok", matched_keywords=matched)


async def compute_semantic_signal(
    resume_text: str,
    job_description: str,
    provider: EmbeddingProvider | None,
    *,
    timeout_seconds: float,
    keywords: list[str] | None = None,
    sentences: list[str] | None = None,
) -> SemanticSignal:
    """Embed resume and job description off the event loop, bounded by a timeout.

    Failures come back as a non-ok signal so callers can fall back to literal matching.
    """
    if provider is None:
        return SemanticSignal(status="skipped", detail="Semantic matching disabled")
    if not job_description.strip() or not resume_text.strip():
        return SemanticSignal(status="skipped", detail="No job description to compare against")

    keyword_list = list(keywords or [])
    sentence_list = list(sentences or [])
    threshold = float(get_scoring_value("semantic.sentence_threshold", 0.75))
    texts = [resume_text, job_description, *keyword_list, *sentence_list]
    try:
        vectors = await asyncio.wait_for(asyncio.to_thread(provider.embed, texts), timeout=timeout_seconds)
        return _score_vectors(vectors, keyword_list, len(sentence_list), threshold)
    except asyncio.TimeoutError:
        logger.warning("semantic_similarity_timeout timeout_seconds=%s", timeout_seconds)
        return SemanticSignal(status="timeout", detail=f"Semantic matching timed out after {timeout_seconds}s")
    except Exception as exc:
        logger.warning("semantic_similarity_failed error=%s", exc)
        return SemanticSignal(status="error", detail=f"Semantic matching unavailable: {exc}")
