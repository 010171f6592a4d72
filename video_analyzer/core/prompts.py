from video_analyzer.models.schemas import PromptRequest, RequestKind

summary_template = """
You are an AI that summarizes YouTube videos.
Summarize the following video information clearly in under 200 words:

{description}
"""

question_template = """
You are an AI assistant analyzing a YouTube video.

VIDEO TITLE: {title}
{context}
USER QUESTION: {question}

Answer ONLY from the video information above.
If the answer is not there, say that the video information does not cover it.
If needed, give a short answer AND a detailed explanation separately.
Example format:

Short Answer: ...
Detailed Explanation: ...
"""


def build_prompt(kind: RequestKind, data: PromptRequest) -> str:
    """Compose the prompt text sent upstream for one request."""
    if kind == RequestKind.SUMMARY:
        return summary_template.format(description=data.description)

    if kind == RequestKind.QUESTION:
        context = f"VIDEO CONTEXT:\n{data.description}\n" if data.description else ""
        return question_template.format(
            title=data.title or "Unknown",
            context=context,
            question=data.custom_prompt or "",
        )

    return data.description
