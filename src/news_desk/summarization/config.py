"""Summarization constants and prompt templates.

Both prompts ask for the same reply layout, which
:func:`news_desk.summarization.parser.parse_summary` understands::

    TITLE: <headline>
    HIGHLIGHTS:
    • <bullet>
    CONTENT:
    <body>
"""

from __future__ import annotations

GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
"""Generative Language API root; the model path is appended per request."""

DEFAULT_DIGEST_TITLE: str = "AI News Summary"
"""Title used when the reply has no usable ``TITLE:`` section."""

WINDOW_RECORD_LIMIT: int = 30
"""Most recent stored records included in a window prompt."""

_REPLY_FORMAT = """\
Write the summary in the following format:

1. Title: one catchy headline for today's AI news (at most 60 characters)
2. Highlights: the {n_highlights} most important points, one line each, as bullets
3. Content: {content_rule}; cover the main trends, technical progress,
   industry impact and outlook. Do not stop mid-answer.

Reply format:
TITLE: [title]
HIGHLIGHTS:
• [highlight 1]
• [highlight 2]
• [highlight 3]
CONTENT:
[detailed content]

Finish the CONTENT section completely before ending the reply."""

DAILY_PROMPT_TEMPLATE: str = (
    "You are an expert AI news summarizer. Summarize the latest AI industry news, "
    "trends and key issues as of today ({today}).\n\n"
    "Include:\n"
    "- new AI model releases (GPT, Claude, Gemini, Llama, ...)\n"
    "- moves by major AI companies (OpenAI, Anthropic, Google, Meta, ...)\n"
    "- advances in AI technology and research\n"
    "- AI ethics and regulation issues\n"
    "- AI industry and market trends\n\n"
    + _REPLY_FORMAT.format(
        n_highlights="3-5",
        content_rule="at most 1500 characters",
    )
)
"""Source-free prompt used by the scheduled daily digest."""

WINDOW_PROMPT_TEMPLATE: str = (
    "You are an expert AI news summarizer. Analyse and summarize the following "
    "AI news items.\n\n"
    "[Today's AI news]\n{articles}\n\n"
    + _REPLY_FORMAT.format(
        n_highlights="4-5",
        content_rule="at least 1500 characters in four or more sections, each starting with '## '",
    )
)
"""Prompt built from the records stored inside a window."""
