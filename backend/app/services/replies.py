"""HTML reply blocks rendered by the chat UI for images and handled failures."""

from html import escape

EXAMPLE_IMAGE_PROMPTS = (
    "A beautiful garden with colorful blossoms",
    "Peaceful nature scene with plants and trees",
    "Serene botanical garden illustration",
    "Calming landscape with natural elements",
    "Artistic nature composition",
)

_PANEL = "text-align: center; margin: 20px 0; padding: 20px; background: #2d2d30; border-radius: 8px;"
_INNER = "margin-top: 20px; padding: 20px; background: #40414f; border-radius: 8px;"
_LIST = "text-align: left; color: #ececf1; line-height: 1.6;"


def _bullets(items) -> str:
    return "".join(f"<li>{escape(item)}</li>" for item in items)


def _tips(title: str, items) -> str:
    return (
        f'<div style="{_INNER}">'
        f'<h4 style="color: #10a37f; margin-bottom: 15px;">💡 {escape(title)}</h4>'
        f'<ul style="{_LIST}">{_bullets(items)}</ul>'
        "</div>"
    )


def image_block(prompt: str, image_url: str, assistant_name: str) -> str:
    url = escape(image_url, quote=True)
    return (
        '<div style="text-align: center; margin: 20px 0;">'
        f'<h3>🎨 Generated Image for: "{escape(prompt)}"</h3>'
        f'<img src="{url}" alt="AI Generated Image" style="max-width: 100%; height: auto; border-radius: 8px;">'
        '<div style="margin-top: 15px;">'
        f'<a href="{url}" download style="margin: 5px;">💾 Download Image</a>'
        f'<a href="{url}" target="_blank" style="margin: 5px;">🔗 Open Full Size</a>'
        "</div>"
        f'<p style="margin-top: 15px; color: #8e8ea0;"><strong>Generated using:</strong> {escape(assistant_name)}</p>'
        "</div>"
    )


def image_failure_block(error: str, with_examples: bool) -> str:
    icon = "🚫" if with_examples else "⚠️"
    examples = _tips("Try These Working Prompts:", (f'"{p}"' for p in EXAMPLE_IMAGE_PROMPTS)) if with_examples else ""
    return (
        f'<div style="{_PANEL}">'
        f"<h3>{icon} Image Generation Failed</h3>"
        f'<p style="color: #8e8ea0; margin: 10px 0;"><strong>Error:</strong> {escape(error)}</p>'
        f"{examples}"
        "</div>"
    )


def rate_limit_block(detail: str) -> str:
    return (
        f'<div style="{_PANEL}">'
        "<h3>⚠️ Rate Limit Exceeded</h3>"
        '<p style="color: #8e8ea0; margin: 10px 0;">'
        "We've reached the API rate limit. The system automatically retried with different models."
        "</p>"
        + _tips(
            "What you can do:",
            (
                "Wait 30-60 seconds and try again",
                "Try a different model (the Fast model is usually more available)",
                "Ask a shorter question",
                "Use the image generation feature instead",
            ),
        )
        + f'<p style="color: #10a37f; margin-top: 15px; font-size: 14px;"><strong>Technical Details:</strong> {escape(detail)}</p>'
        "</div>"
    )


def fallback_block(text: str) -> str:
    return (
        f'<div style="{_PANEL}">'
        "<h3>🤖 AI Assistant</h3>"
        f'<p style="color: #8e8ea0; margin: 10px 0;">{escape(text)}</p>'
        + _tips(
            "Alternative Options:",
            (
                "Try image generation (usually more available)",
                "Wait a few minutes and try again",
                "Ask a simpler question",
                "Check your internet connection",
            ),
        )
        + "</div>"
    )
