import markdown
import pymdownx.superfences
import pymdownx.emoji
import logging

logger = logging.getLogger(__name__)

# Headings are left without generated ids (no toc/attr_list), so
# "# Heading" renders as a bare <h1>Heading</h1>.
EXTENSIONS = [
    'tables',
    'sane_lists',
    'def_list',
    'abbr',
    'footnotes',
    'pymdownx.betterem',
    'pymdownx.tilde',
    'pymdownx.mark',
    'pymdownx.tasklist',
    'pymdownx.magiclink',
    'pymdownx.superfences',
    'pymdownx.emoji',
]

EXTENSION_CONFIGS = {
    "pymdownx.superfences": {
        "custom_fences": [
            {
                'name': 'mermaid',
                'class': 'mermaid',
                'format': pymdownx.superfences.fence_div_format
            }
        ]
    },
    "pymdownx.emoji": {
        "emoji_index": pymdownx.emoji.gemoji,
        "emoji_generator": pymdownx.emoji.to_alt,
    }
}


def render_markdown(md_text: str) -> str:
    """Render markdown source to an HTML fragment."""
    md_instance = markdown.Markdown(
        extensions=EXTENSIONS,
        extension_configs=EXTENSION_CONFIGS,
    )
    logger.debug(f"Render markdown: {len(md_text)} chars input")
    return md_instance.convert(md_text)
