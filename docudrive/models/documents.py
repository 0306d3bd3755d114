from datetime import datetime

from docudrive.models.common import CamelModel


class DocumentMetadata(CamelModel):
    file_type: str
    file_name: str
    file_size: int | None = None
    page_count: int | None = None
    author: str | None = None
    title: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: datetime | None = None
    modification_date: datetime | None = None


class ParsedContent(CamelModel):
    content: str
    metadata: DocumentMetadata


class AnalysisResult(CamelModel):
    summary: str
    keywords: list[str]
    headings: list[str]
    potential_tables: bool
    word_count: int
    line_count: int


class AnalyzedContent(ParsedContent):
    analysis: AnalysisResult


class SupportCheck(CamelModel):
    supported: bool
    mime_type: str
