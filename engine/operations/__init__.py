"""Operations layer for the code index.

This package handles index maintenance and retrieval:
- Per-file indexing with staleness detection (DocumentIndexer)
- Index update passes over all namespaces (IndexOrchestrator)
- Deleted-file cleanup (OrphanCleaner)
- Query execution and prompt assembly (QueryExecutor, SnippetCollector)

Principles:
- Single Responsibility Principle
- Dependency Injection
"""
