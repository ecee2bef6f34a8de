"""
System prompts for the wiki assistant.

The retrieved wiki context is pasted into the system message; the user's
question goes in as the last human message.
"""

from typing import Dict, List, Optional

DEFAULT_COMPANY_NAME = "Amsterdam Standard"

SYSTEM_TEMPLATE = """You are a helpful assistant for {company_name} company.
Use the following pieces of context to answer the question at the end.
If you don't know the answer, just say that you don't know, don't try to make up an answer.
Keep your answers informative and concise.{sources_instruction}

Context:
----------------
{context}"""

SOURCES_INSTRUCTION = """
At the end of your answer, include a "Sources:" section that lists the source documents used."""


def get_system_prompt(
    context: str,
    company_name: str = DEFAULT_COMPANY_NAME,
    with_sources: bool = True
) -> str:
    """
    Get system prompt for answering from wiki context.

    Args:
        context: Formatted retrieved documents
        company_name: Company the assistant speaks for
        with_sources: Ask the model to finish with a Sources: section

    Returns:
        System prompt string
    """
    return SYSTEM_TEMPLATE.format(
        company_name=company_name,
        sources_instruction=SOURCES_INSTRUCTION if with_sources else "",
        context=context
    )


def build_messages(
    question: str,
    context: str,
    history: Optional[List[Dict[str, str]]] = None,
    company_name: str = DEFAULT_COMPANY_NAME,
    with_sources: bool = True
) -> List[Dict[str, str]]:
    """
    Build the chat messages for one question.

    Returns:
        [system, *history, user]
    """
    messages = [{
        "role": "system",
        "content": get_system_prompt(context, company_name, with_sources)
    }]

    if history:
        messages.extend(
            {"role": msg["role"], "content": msg["content"]}
            for msg in history
            if msg.get("role") != "system"
        )

    messages.append({"role": "user", "content": question})
    return messages
