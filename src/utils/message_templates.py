"""
Message templates for Discord replies.

Centralizes the user-facing strings of /createchannels and the mention
listener so tests and handlers agree on the wording.
"""

from typing import Sequence

from .directory import CreationResult


class MessageTemplates:
    """Centralized message templates for Discord messages."""

    UPSTREAM_UNAVAILABLE = (
        "❌ Error: The language model service is unavailable right now. "
        "Please try again in a moment."
    )

    NO_MODEL_RESPONSE = "❌ Error: The language model returned no response. Try rephrasing your request."

    MALFORMED_RESPONSE = "❌ Error: Could not read a channel list from the model's answer: {error}"

    UNEXPECTED_ERROR = "❌ Error: {error}"

    GUILD_ONLY = "❌ Error: Channels can only be created inside a server."

    NOTHING_TO_CREATE = "ℹ️ The model did not suggest any channels to create."

    REPORT_HEADER = "**Channel Creation Report:** {created} created, {failed} failed"

    REPORT_SUCCESS_LINE = "✅ {type}: {name}"

    REPORT_FAILURE_LINE = "❌ {name}: {error}"

    MENTION_EMPTY = "👋 Mention me with a question, or use `/createchannels` to set up channels."

    MENTION_UNAVAILABLE = "⚠️ I can't reach the language model right now. Please try again later."

    @classmethod
    def format_malformed_response(cls, error: str) -> str:
        """Format the parse failure message."""
        return cls.MALFORMED_RESPONSE.format(error=error)

    @classmethod
    def format_unexpected_error(cls, error: str) -> str:
        """Format a generic failure message."""
        return cls.UNEXPECTED_ERROR.format(error=error)

    @classmethod
    def format_result_line(cls, result: CreationResult) -> str:
        """Format one line of the creation report."""
        if result.created:
            kind = result.type.value.upper() if result.type else "CHANNEL"
            return cls.REPORT_SUCCESS_LINE.format(type=kind, name=result.name)
        return cls.REPORT_FAILURE_LINE.format(name=result.name, error=result.error)

    @classmethod
    def format_creation_report(cls, results: Sequence[CreationResult]) -> str:
        """Format the per-item report sent after creation."""
        if not results:
            return cls.NOTHING_TO_CREATE

        created = sum(1 for r in results if r.created)
        header = cls.REPORT_HEADER.format(created=created, failed=len(results) - created)
        lines = [cls.format_result_line(r) for r in results]
        return header + "\n" + "\n".join(lines)
