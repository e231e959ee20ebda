"""Answer prompt assembly"""
from typing import List

from domain_models import CodeExample

NO_RELEVANT_CODE = "No relevant code found in the codebase for this query."

PROMPT_HEADER = "Here are some snippets from a codebase and supporting documentation:\n\n"

PROMPT_INSTRUCTIONS = f"""Please extract the snippets most relevant to the query,
and return them verbatim. When referencing code in your answer:
1. Prefix each snippet with a path, namespace and line range
2. Reproduce relevant snippets verbatim, wrapped in triple-backtick quotes
3. Do not include any additional text or commentary

If you cannot find any relevant snippets, return "{NO_RELEVANT_CODE}"
DO NOT MAKE UP CODE, ONLY RETURN EXACTLY WHAT IS PROVIDED."""


def render_example(example: CodeExample) -> str:
    return (
        f"File: {example.path} (lines {example.start_line}-{example.end_line}, "
        f"namespace = {example.namespace})\n```\n{example.content}\n```\n\n"
    )


def build_prompt(query: str, examples: List[CodeExample]) -> str:
    parts = [PROMPT_HEADER]
    parts.extend(render_example(example) for example in examples)
    parts.append(f"Query: {query}\n\n")
    parts.append(PROMPT_INSTRUCTIONS)
    return "".join(parts)
