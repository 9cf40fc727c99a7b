from cortex.config import get_settings
from cortex.errors import EmbeddingError
from cortex.openai_client import get_openai_client


def generate_embedding(text: str) -> list[float]:
    """
    Generate embedding for text using the configured embedding model.

    Args:
        text: Text to embed (a note or a search query)

    Returns:
        Embedding vector (settings.embedding_dimensions long)
    """
    settings = get_settings()
    client = get_openai_client()

    response = client.embeddings.create(
        model=settings.embedding_model,
        input=text,
        dimensions=settings.embedding_dimensions
    )

    if not response.data or not response.data[0].embedding:
        raise EmbeddingError("Failed to generate embedding")

    return response.data[0].embedding


def generate_embeddings_batch(texts: list[str]) -> list[list[float]]:
    """
    Generate embeddings for multiple texts in one API call.

    Args:
        texts: List of texts to embed

    Returns:
        List of embedding vectors, same order as texts
    """
    if not texts:
        return []

    settings = get_settings()
    client = get_openai_client()

    response = client.embeddings.create(
        model=settings.embedding_model,
        input=texts,
        dimensions=settings.embedding_dimensions
    )

    # Sort by index to maintain order
    sorted_data = sorted(response.data, key=lambda x: x.index)
    if len(sorted_data) != len(texts):
        raise EmbeddingError(
            f"Expected {len(texts)} embeddings, got {len(sorted_data)}"
        )
    return [item.embedding for item in sorted_data]
