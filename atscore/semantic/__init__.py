from .similarity import (
    EmbeddingProvider,
    HashingEmbeddingProvider,
    SemanticSignal,
    blend_match_scores,
    compute_semantic_signal,
    cosine_similarity,
)

__all__ = [
    "EmbeddingProvider",
    "HashingEmbeddingProvider",
    "SemanticSignal",
    "blend_match_scores",
    "compute_semantic_signal",
    "cosine_similarity",
]
