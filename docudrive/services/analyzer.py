import re

from docudrive.models.documents import AnalysisResult, ParsedContent

ACADEMIC_KEYWORDS = (
    "analysis",
    "research",
    "study",
    "method",
    "approach",
    "system",
    "design",
    "implementation",
    "evaluation",
    "results",
    "conclusion",
    "abstract",
    "introduction",
    "methodology",
    "framework",
    "model",
    "algorithm",
    "performance",
    "optimization",
    "requirements",
    "architecture",
)

MAX_HEADINGS = 10
MAX_HEADING_LENGTH = 100
SUMMARY_SENTENCES = 3
SUMMARY_LENGTH = 300
MIN_SENTENCE_LENGTH = 20

CAPITALIZED_NO_PERIOD = re.compile(r"[A-Z][^.]*")
NUMBERED_HEADING = re.compile(r"[0-9]+\.?\s+[A-Z]")
SENTENCE_BREAK = re.compile(r"[.!?]+")
ALIGNED_COLUMNS = re.compile(r"\s{4,}\S+\s{4,}\S+")


def _is_heading(line: str) -> bool:
    trimmed = line.strip()
    if not 0 < len(trimmed) < MAX_HEADING_LENGTH:
        return False
    return (
        trimmed == trimmed.upper()
        or CAPITALIZED_NO_PERIOD.fullmatch(trimmed) is not None
        or NUMBERED_HEADING.match(trimmed) is not None
    )


def _looks_like_table_row(line: str) -> bool:
    return len(line.split("\t")) > 3 or ALIGNED_COLUMNS.search(line) is not None


def _summarize(content: str) -> str:
    sentences = [s for s in SENTENCE_BREAK.split(content) if len(s.strip()) > MIN_SENTENCE_LENGTH]
    if not sentences:
        return content[:SUMMARY_LENGTH] + "..."
    return ". ".join(sentences[:SUMMARY_SENTENCES])[:SUMMARY_LENGTH] + "..."


def extract_key_information(parsed: ParsedContent) -> AnalysisResult:
    """Derive summary, keywords, headings and simple counts from parsed text.

    Tuned for academic and technical documents. Pure function of the content.
    """
    content = parsed.content
    lines = content.split("\n")
    lowered = content.lower()

    return AnalysisResult(
        summary=_summarize(content),
        keywords=[keyword for keyword in ACADEMIC_KEYWORDS if keyword in lowered],
        headings=[line for line in lines if _is_heading(line)][:MAX_HEADINGS],
        potential_tables=any(_looks_like_table_row(line) for line in lines),
        word_count=len(content.split()),
        line_count=len(lines),
    )
