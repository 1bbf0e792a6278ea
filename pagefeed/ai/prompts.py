"""
Feed Generation Prompt
======================

Builds the instruction prompt sent to the model. The prompt carries three
contracts the response classifier relies on: raw XML starting with the XML
prologue, an RSS 2.0 channel layout, and a single ``<error>`` element when
no articles can be found.
"""

XML_PROLOGUE = '<?xml version="1.0" encoding="UTF-8" ?>'

NO_ARTICLES_MESSAGE = (
    "The AI could not find any articles on the provided URL. "
    "It may not be a valid news or blog page."
)

MIN_ITEMS = 5
MAX_ITEMS = 15

FEED_PROMPT_TEMPLATE = """
You are an expert AI that converts a news or blog website's HTML into a valid RSS 2.0 feed.
Analyze the following HTML from the URL: {url}
The site origin is: {origin}
Your task is to generate a complete and valid RSS 2.0 XML feed.

**Instructions:**
1.  The output MUST be only the raw XML content, starting with `{prologue}`. Do not add any other text, markdown, code fences, or explanations.
2.  Create a `<channel>` with appropriate `<title>`, `<link>`, `<description>`, `<language>`, and `<lastBuildDate>`.
3.  Create multiple `<item>` elements, one for each article (target {min_items}-{max_items} items). Each must have `<title>`, `<link>` (absolute URL), `<description>`, and optionally `<pubDate>`.
4.  Article links in the HTML may be relative. Resolve every relative link against {origin} so each `<link>` is an absolute URL.

**Error Handling:**
-   If you cannot process the HTML or find any articles, you MUST return a response containing ONLY the following XML structure:
    `<error><message>{no_articles}</message></error>`

**HTML Content to Analyze:**
```html
{html}
```
"""


class PromptBuilder:
    """Renders the feed generation prompt.

    The HTML is embedded as-is: no sanitising and no truncation.
    """

    def __init__(self, template: str = FEED_PROMPT_TEMPLATE):
        self.template = template

    def build(self, url: str, origin: str, html: str) -> str:
        """Render the prompt for one page.

        Args:
            url: Page URL the HTML came from
            origin: Scheme and host used to resolve relative links
            html: Fetched page HTML

        Returns:
            Prompt text
        """
        return self.template.format(
            url=url,
            origin=origin,
            html=html,
            prologue=XML_PROLOGUE,
            min_items=MIN_ITEMS,
            max_items=MAX_ITEMS,
            no_articles=NO_ARTICLES_MESSAGE,
        )


def build_feed_prompt(url: str, origin: str, html: str) -> str:
    """Convenience function to render the default prompt."""
    return PromptBuilder().build(url, origin, html)
