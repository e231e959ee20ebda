"""
External capability adapters.

- Embedding (SentenceTransformerEmbedder)
- File summarization (OllamaSummarizer)
- Answer generation (OllamaGenerator)

Use CapabilityFactory to build all three from Config.
"""
