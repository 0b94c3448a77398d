"""
Video summary prompt templates.

The prompt defines WHAT a summary looks like, and the PDF layout depends
on it: the model is told to answer in the small markdown dialect the
renderer understands (# headings, - bullets, **bold**, *italic*).

Key design decisions:
1. System prompt sets the analyst role and the output dialect
2. Length instructions scale the summary (short / medium / comprehensive)
3. A fixed fallback sentence lets us detect "not enough information"
   reliably instead of rendering an apology as a PDF
"""

INSUFFICIENT_INFORMATION_MESSAGE = (
    "The AI could not find enough information to generate a summary. "
    "This often happens with very new, obscure, or restricted videos. "
    "Please try again later."
)

# Prefix we match on; the model sometimes drops the last sentences
INSUFFICIENT_INFORMATION_MARKER = (
    "The AI could not find enough information to generate a summary."
)


SYSTEM_PROMPT = """You are an intelligent video analyst. You write detailed, \
well-structured summaries of online videos for readers who have not watched them.

Formatting rules (the summary is rendered to PDF by a minimal renderer):
- Use "#", "##" and "###" headings for sections
- Use "- " bullet points for lists (no nested lists)
- Use **bold** and *italic* for emphasis
- Do NOT use tables, links, images, code blocks, or numbered lists
- Return the summary directly as Markdown, not wrapped in JSON or code fences"""


LENGTH_INSTRUCTIONS = {
    "short": (
        "Generate a concise summary (approx. 150-250 words). Structure it with "
        "a clear Introduction, Main Points, and Conclusion."
    ),
    "medium": (
        "Generate a detailed summary (approx. 400-750 words). Follow APA-style "
        "structure: Introduction (thesis/topic), Body Paragraphs (detailed "
        "evidence/examples), and Conclusion. Use clear subheadings."
    ),
    "comprehensive": (
        "Generate an extensive, in-depth summary (1000+ words). Follow a strict "
        "APA-style structure: Abstract/Introduction, Detailed Body Sections with "
        "specific examples/chronology, and a Conclusion. Use multiple levels of "
        "subheadings to organize the content effectively."
    ),
}


def get_length_instruction(summary_length: str) -> str:
    return LENGTH_INSTRUCTIONS.get(summary_length, "Generate a standard summary.")


def build_summary_prompt(video_url: str, video_title: str, summary_length: str = "medium") -> str:
    """Build the user prompt for one video.

    Args:
        video_url: The video link as submitted.
        video_title: Title from validation (falls back to the URL).
        summary_length: "short", "medium" or "comprehensive".

    Returns:
        The complete prompt string to send to Claude.
    """
    return f"""Generate a **comprehensive, detailed summary** of the specific \
content of the YouTube video titled "{video_title}" ({video_url}).

**Goal:** The reader wants to know exactly what happens in the video, as if \
they watched it themselves. Do NOT just summarize the video's description or topic.

**Instructions:**
1. **Recall the Content:** Use everything you know about this video: its \
transcript, key arguments, examples, and structure.
2. **Synthesize:** If you don't know the full content, combine what you do know \
about the video, its creator, and its subject. Do not refuse just because a \
transcript is unavailable.
3. **Maximize Detail:** Expand on every available point with specific examples, \
arguments and context. If the chronological order is unclear, organize by theme.
4. **Format:** {get_length_instruction(summary_length)}

**Fallback (only if you know NOTHING about this video):**
Return exactly this text and nothing else:
"{INSUFFICIENT_INFORMATION_MESSAGE}"
"""
