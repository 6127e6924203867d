"""Prompt templates for query generation and page extraction."""

QUERY_GENERATION_SYSTEM_PROMPT = (
    "You are a research assistant skilled at generating Google search queries. "
    "Brainstorm 10 to 20 variations that will provide useful results when I give you an objective. "
    "Provide only the search queries without any other information."
)

EXTRACTION_SYSTEM_PROMPT = "You are a diligent research assistant skilled at extracting structured data from text files."

RELEVANCE_PROMPT = """Is the provided text relevant to the objective stated? The text came from a web search while researching the objective.

Objective:
{objective}

Text:
{text}"""

EXTRACTION_PROMPT_HEADER = (
    "Please parse the following text into a JSON object. Reply with the JSON object and nothing else.\n\n"
)

EXTRACTION_PROMPT_FOOTER = "\nIf you are not sure about a field, put a null response.\nHere is the text:\n"

__all__ = [
    "QUERY_GENERATION_SYSTEM_PROMPT",
    "EXTRACTION_SYSTEM_PROMPT",
    "RELEVANCE_PROMPT",
    "EXTRACTION_PROMPT_HEADER",
    "EXTRACTION_PROMPT_FOOTER",
]
