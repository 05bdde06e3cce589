#!/usr/bin/env python3
"""
Index Company Data into Milvus
==============================

Embeds every company document and rebuilds the Milvus collection.

The corpus comes from a JSON file (array of objects with ``name`` and
``content``) or, when no file is given, from the ``company_data`` table.

Usage:
    python scripts/index_corpus.py docs/company_data.json
    python scripts/index_corpus.py --bag-of-words
"""

import argparse
import asyncio

from supportdesk.config import settings
from supportdesk.infrastructure.database import close_database, get_session_maker, init_database
from supportdesk.infrastructure.llm import (
    BagOfWordsEmbedder, LLMEmbedder, OllamaChatClient
)
from supportdesk.infrastructure.vectorstore import MilvusVectorStore
from supportdesk.replies.infrastructure import (
    CorpusIndexer, InMemoryDocumentStore, SQLAlchemyDocumentStore
)
from supportdesk.shared.infrastructure.logging import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild the Milvus index of company data")
    parser.add_argument("corpus", nargs="?", help="JSON corpus file (defaults to the database)")
    parser.add_argument(
        "--bag-of-words",
        action="store_true",
        default=settings.use_bag_of_words_embeddings,
        help="Embed locally instead of through the model server",
    )
    return parser.parse_args()


async def main():
    """Main function to rebuild the vector index."""
    args = parse_args()
    setup_logging(settings.log_level, settings.environment)

    if args.corpus:
        document_store = InMemoryDocumentStore.from_json_file(args.corpus)
    else:
        init_database()
        document_store = SQLAlchemyDocumentStore(get_session_maker())

    llm_client = None
    if args.bag_of_words:
        embedder = BagOfWordsEmbedder()
    else:
        llm_client = OllamaChatClient()
        embedder = LLMEmbedder(llm_client)

    vector_store = MilvusVectorStore(embedder)
    try:
        result = await CorpusIndexer(document_store, vector_store).rebuild()
        print(f"Indexed {result['documents_indexed']} documents "
              f"(dimension {result['embedding_dimension']}) into {settings.milvus_collection_name}")
    finally:
        await vector_store.close()
        if llm_client:
            await llm_client.close()
        if not args.corpus:
            await close_database()


if __name__ == "__main__":
    asyncio.run(main())
