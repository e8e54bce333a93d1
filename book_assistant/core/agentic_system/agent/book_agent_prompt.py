"""
Book assistant system prompt.

Defines the system prompt template for the book recommendation agent:
purpose, available tools and the block response contract.
Supports Langfuse prompt registry integration.

Dependencies: langchain_core.prompts, book_assistant.observability.prompt_registry
System role: Prompt template for book assistant behavior
"""

import json
import logging

from langchain_core.prompts import ChatPromptTemplate

from book_assistant.core.blocks.block_schema import block_json_schema
from book_assistant.observability.prompt_registry.models import ModelConfig
from book_assistant.observability.prompt_registry.registry import PromptRegistry

logger = logging.getLogger(__name__)

BOOK_AGENT_PROMPT_NAME = "book-assistant-agent"

SYSTEM_PROMPT = """You are a knowledgeable book recommendation assistant that helps users discover books.

## Tools
You have access to a database of books through these tools:
- search_books: search by title, author or ISBN
- get_book_details: full details, reviews and similar-book count for one ISBN
- get_similar_books: books similar to a given ISBN
- get_trending_books: currently trending or popular books
- get_books_by_genre: books in a genre
- get_highly_rated_books: books rated 4.0 or above
- get_recent_books: recently published books
{news_section}
## Instructions
1. Search for relevant books with the tools before recommending anything
2. Provide personalized recommendations based on the user's interests
3. Include details like ratings, genres, and similar books
4. Be specific: mention book titles, authors, and key details
5. If you cannot find specific information, acknowledge this and suggest alternatives
6. Be friendly, informative, and enthusiastic about books!

## Response Format
{format_instructions}"""

NEWS_SECTION = """- search_book_news: recent book-related news and trends

For news searches, use queries like:
- "new book releases [genre]" for new releases
- "[author name] new book" for author-specific news
- "book award winner" for literary awards
- "bestseller list" for trending books
"""

FORMAT_INSTRUCTIONS = """Your ENTIRE reply must be exactly one JSON object matching this schema, with no text before or after it:

<schema>

Block types:
- text: {"markdown": "..."} conversational text in Markdown
- book_card: {"isbn", "title", "author", "rating", "genres", "price", "image_url", "description"} one recommended book
- book_list: {"title", "books": [book_card content, ...]} use for 2 or more books
- book_spotlight: book_card fields plus {"extended_description", "key_themes", "why_recommended", "similar_books"} use for one book in depth
- image: {"url", "alt"}

Guidelines:
- Prefer book_list whenever you recommend 2 or more books
- Use book_spotlight when the user asks about one book in depth
- Always open with a text block and close with a text block around recommendations
- Copy isbn, title, author, rating, genres, price and image_url from tool results; never invent books"""

BOOK_AGENT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
])


def format_instructions() -> str:
    """Block contract shown to the model, schema included."""
    schema = json.dumps(block_json_schema(), indent=2)
    return FORMAT_INSTRUCTIONS.replace("<schema>", schema)


def register_book_agent_prompt(
    model_id: str = "gemini-2.5-flash",
    temperature: float = 0.7,
    timeout_seconds: float | None = None,
    tool_names: list[str] | None = None,
    labels: list[str] | None = None,
) -> None:
    """
    Register book agent prompt with Langfuse.

    Args:
        model_id: Chat model identifier
        temperature: Model temperature
        timeout_seconds: Completion timeout the prompt runs under
        tool_names: Tools offered alongside the prompt
        labels: Optional labels (e.g., ["production", "staging"])
    """
    registry = PromptRegistry()

    if not registry.is_enabled:
        logger.debug("Prompt registry disabled, skipping registration")
        return

    config = ModelConfig(
        model=model_id,
        temperature=temperature,
        timeout_seconds=timeout_seconds,
        tools=tool_names or [],
    )

    registry.register_prompt(
        name=BOOK_AGENT_PROMPT_NAME,
        template=BOOK_AGENT_PROMPT,
        config=config,
        labels=labels or ["development"],
    )
    logger.info("Registered book agent prompt: name=%s", BOOK_AGENT_PROMPT_NAME)


def get_book_agent_prompt(
    use_registry: bool = False,
    label: str | None = None,
) -> ChatPromptTemplate:
    """
    Get the book agent prompt template.

    Args:
        use_registry: Whether to fetch from Langfuse registry
        label: Optional label filter when using registry

    Returns:
        ChatPromptTemplate: Configured prompt for the book agent
    """
    if use_registry:
        registry = PromptRegistry()
        if registry.is_enabled:
            prompt = registry.get_langchain_prompt(BOOK_AGENT_PROMPT_NAME, label=label)
            if prompt is not None:
                logger.debug("Using prompt from registry: name=%s", BOOK_AGENT_PROMPT_NAME)
                return prompt
            logger.debug("Prompt not found in registry, using local template")

    return BOOK_AGENT_PROMPT


def build_system_prompt(
    news_enabled: bool = False,
    use_registry: bool = False,
    label: str | None = None,
) -> str:
    """
    Render the system prompt.

    Args:
        news_enabled: Mention the news lookup tool
        use_registry: Whether to fetch the template from Langfuse
        label: Optional label filter when using registry

    Returns:
        str: System prompt text
    """
    prompt = get_book_agent_prompt(use_registry=use_registry, label=label)
    messages = prompt.format_messages(
        news_section=NEWS_SECTION if news_enabled else "",
        format_instructions=format_instructions(),
    )
    return "\n\n".join(str(message.content) for message in messages)
