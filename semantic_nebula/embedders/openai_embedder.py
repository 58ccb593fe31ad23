"""
OpenAI embeddings as the nebula's scoring provider.

The corpus is embedded once per load (and cached); each search embeds only the
query text.
"""

import logging
import os
import time
from typing import Iterator, Optional

import numpy as np
from openai import OpenAI, RateLimitError
from dotenv import load_dotenv

from .base import BaseEmbedder, register_embedder
import config

logger = logging.getLogger(__name__)

load_dotenv()


@register_embedder("openai")
class OpenAIEmbedder(BaseEmbedder):
    """
    Embeds texts with the OpenAI embeddings endpoint.

    Requests are split so that each stays under both `batch_size` texts and a
    rough token ceiling; rate-limited requests are retried with doubling delays.
    """

    # Request ceiling is 300k tokens; estimate from character count
    TOKEN_LIMIT = 290_000
    CHARS_PER_TOKEN = 3.5
    MAX_TEXT_CHARS = 20_000

    def __init__(
        self,
        model: str = config.OPENAI_MODEL,
        batch_size: int = config.OPENAI_BATCH_SIZE,
        api_key: Optional[str] = None,
        client: Optional[OpenAI] = None,
        max_retries: int = config.OPENAI_MAX_RETRIES,
        retry_delay: float = config.OPENAI_RETRY_DELAY
    ):
        """
        Args:
            model: Embedding model name
            batch_size: Max texts per request
            api_key: Overrides OPENAI_API_KEY from the environment / .env
            client: Ready-made client; no key lookup happens when given
            max_retries: Attempts per request before a rate limit is re-raised
            retry_delay: First backoff delay in seconds

        Raises:
            ValueError: If no client is given and no API key can be found
        """
        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError(
                    "OpenAI API key not found. "
                    "Set OPENAI_API_KEY in .env file or pass api_key parameter."
                )
            client = OpenAI(api_key=api_key)

        self.client = client
        self.model = model
        self.batch_size = max(1, batch_size)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

    @property
    def name(self) -> str:
        return f"openai_{self.model}"

    @property
    def dimension(self) -> int:
        return config.OPENAI_EMBEDDING_DIM

    def embed(self, texts: list[str]) -> np.ndarray:
        if not texts:
            return np.zeros((0, self.dimension), dtype=np.float32)

        prepared = [self._prepare(t) for t in texts]
        rows: list[list[float]] = []
        for i, batch in enumerate(self._batches(prepared), 1):
            if len(prepared) > self.batch_size:
                logger.info(f"Embedding request {i} ({len(batch)} texts)")
            rows.extend(self._request(batch))

        return self.normalize(np.asarray(rows, dtype=np.float32))

    def _prepare(self, text: str) -> str:
        # The endpoint rejects empty input
        text = str(text or "").strip()[: self.MAX_TEXT_CHARS]
        return text or " "

    def _batches(self, texts: list[str]) -> Iterator[list[str]]:
        batch: list[str] = []
        tokens = 0.0
        for text in texts:
            cost = len(text) / self.CHARS_PER_TOKEN
            if batch and (len(batch) >= self.batch_size or tokens + cost > self.TOKEN_LIMIT):
                yield batch
                batch, tokens = [], 0.0
            batch.append(text)
            tokens += cost
        if batch:
            yield batch

    def _request(self, batch: list[str]) -> list[list[float]]:
        """
        One embeddings call, retried while rate limited.

        Raises:
            RateLimitError: If the last attempt is still rate limited
        """
        delay = self.retry_delay
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.client.embeddings.create(model=self.model, input=batch)
                break
            except RateLimitError:
                if attempt == self.max_retries:
                    raise
                logger.warning(f"Rate limited (attempt {attempt}/{self.max_retries}), retrying in {delay}s")
                time.sleep(delay)
                delay *= 2

        # Response rows may arrive out of order
        return [row.embedding for row in sorted(response.data, key=lambda row: row.index)]
