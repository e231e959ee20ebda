import logging
from typing import List

from config import QueryConfig
from domain_models import FILE_ENTRY_FALSE, QueryResult, SearchResult
from ingestion.database import DocumentStore
from ingestion.namespace import NamespaceMap
from operations.prompt_builder import NO_RELEVANT_CODE, build_prompt
from operations.snippet_collector import SnippetCollector
from pipeline.interfaces.generator import GeneratorInterface

logger = logging.getLogger(__name__)


def filter_results(results: List[SearchResult], config: QueryConfig) -> List[SearchResult]:
    """Keep good matches, backfill weak ones up to the minimum, cap the total.

    `results` must already be ranked by similarity, highest first.
    """
    good, weak = [], []
    for result in results:
        if result.similarity >= config.good_similarity:
            good.append(result)
        else:
            weak.append(result)
        logger.debug(f"potential query result {result.document.id} similarity={result.similarity:.4f}")

    filtered = good
    if len(filtered) < config.min_results:
        needed = config.min_results - len(filtered)
        filtered = filtered + weak[:needed]

    return filtered[:config.max_results]


class QueryExecutor:
    """Answers a free-text question from indexed code.

    Store errors and embedding/generation failures propagate; an empty
    result set is answered with NO_RELEVANT_CODE without calling the
    generator.
    """

    def __init__(self, store: DocumentStore, generator: GeneratorInterface,
                 namespaces: NamespaceMap, config: QueryConfig):
        self.store = store
        self.generator = generator
        self.config = config
        self.collector = SnippetCollector(namespaces, config)

    def search(self, text: str, limit: int) -> List[SearchResult]:
        """Top chunk documents for a query, limit clamped to the store size"""
        limit = min(limit, self.store.count())
        if limit <= 0:
            return []
        return self.store.query(text, limit, {"is_file_entry": FILE_ENTRY_FALSE})

    def execute(self, text: str) -> QueryResult:
        if not text.strip():
            return QueryResult(answer=NO_RELEVANT_CODE)
        results = filter_results(self.search(text, self.config.top_k), self.config)
        if not results:
            return QueryResult(answer=NO_RELEVANT_CODE)

        examples = self.collector.collect(results)
        prompt = build_prompt(text, examples)
        logger.info(f"Generating answer from {len(examples)} snippets")
        answer = self.generator.generate(prompt)
        return QueryResult(answer=answer, prompt=prompt, examples=examples)
