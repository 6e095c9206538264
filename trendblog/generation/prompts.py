"""Prompt construction for article and image generation."""

from typing import List, Optional

from ..ingestion.grounding import extract_links

NO_CONTENT_PLACEHOLDER = "(No additional post content)"
NO_COMMENTS_PLACEHOLDER = "No comments available."

JSON_CONTRACT = """Return the response as a JSON object with this structure:
{
  "title": "Your Catchy Title",
  "metaDescription": "Your Meta Description",
  "content": "Your blog content with HTML tags for formatting."
}
IMPORTANT: The entire response must be a single, valid JSON object with exactly the keys "title", "metaDescription" and "content". Escape double quotes inside string values (use \\" for quotes inside the string)."""


def format_comments(comments: List[str]) -> str:
    """Number comments for the prompt, or return a placeholder."""
    if not comments:
        return NO_COMMENTS_PLACEHOLDER
    return "\n\n".join(f"Comment {i}: {comment}" for i, comment in enumerate(comments, start=1))


def source_link_html(post_url: str) -> str:
    return f'<a href="{post_url}" target="_blank" rel="noopener noreferrer">{post_url}</a>'


def build_article_prompt(
    title: str,
    subreddit: str,
    selftext: str,
    comments: List[str],
    post_url: str,
    grounding_excerpt: Optional[str] = None,
) -> str:
    """
    Build the article prompt for a Reddit topic.

    Args:
        title: Post title
        subreddit: Subreddit the post came from
        selftext: Post body, may be empty
        comments: Flattened comment bodies
        post_url: Permalink cited in the Source section
        grounding_excerpt: Text of the first linked page, if it was fetched

    Returns:
        Prompt text
    """
    grounding = ""
    links = extract_links(f"{selftext} {title}")
    if links:
        grounding = (
            "\n\nPlease ground your blog content using information specifically "
            f"from this link: {links[0]}"
        )
        if grounding_excerpt:
            grounding += f"\n\nExcerpt from the linked page:\n{grounding_excerpt}"

    return f"""Write a detailed, engaging, and original blog post (500-700 words) about the following trending Reddit topic from r/{subreddit}.

Use the post title, the full post content, and relevant comments to create a rich and informative article.{grounding}

Post Title:
"{title}"

Post Content:
{selftext or NO_CONTENT_PLACEHOLDER}

Comments from the community:
{format_comments(comments)}

Include the following:
1. A catchy and SEO-friendly title.
2. A meta description (150-160 characters).
3. The main content with clear headings (<h2>), paragraphs (<p>), and bulleted lists (<ul><li>) for key points.
4. A "Key Takeaways" section at the end, summarizing the main points in a bulleted list.
5. An informative tone that is accessible to a general audience.

At the bottom of the blog post, include a section titled "<h2>Source</h2>" with a clickable hyperlink to the original Reddit post:
{source_link_html(post_url)}

{JSON_CONTRACT}"""


def build_topic_prompt(topic: str) -> str:
    """Build the article prompt for a free-text topic."""
    return f"""Write a detailed, engaging, and original blog post (500-700 words) about the following topic: "{topic}".

Include the following:
1. A catchy and SEO-friendly title.
2. A meta description (150-160 characters).
3. The main content with clear headings (<h2>), paragraphs (<p>), and bulleted lists (<ul><li>) for key points.
4. A "Key Takeaways" section at the end.
5. An informative tone that is accessible to a general audience.

{JSON_CONTRACT}"""


def build_image_prompt(title: str) -> str:
    """Build the illustration prompt from a generated title."""
    return (
        "Create a visually stunning, quality 3D rendered photo for a tech blog. "
        "The image should be precise and artistic, representing the core themes "
        f'of this title: "{title}". Focus on a modern, clean aesthetic.'
    )
