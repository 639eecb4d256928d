"""
Output of validation outcomes: human-readable text or a single JSON report.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

from ..validation.orchestrator import DocumentResult, RunResult, SchemaResult, ValidationListener


def build_report(result: RunResult) -> Dict[str, Any]:
    """Plain-dict form of a run, suitable for JSON output"""
    return {
        "valid": result.valid,
        "schemas": [
            {
                "schema": s.schema,
                "valid": s.valid,
                "error": s.error,
                "documents": [
                    {
                        "document": d.document,
                        "valid": d.valid,
                        "error_count": d.error_count,
                        "message": d.message,
                        "errors": [e.to_dict() for e in d.errors],
                    }
                    for d in s.documents
                ],
            }
            for s in result.schemas
        ],
    }


class TextReporter(ValidationListener):
    """Prints a line per document as results arrive"""

    def __init__(self, quiet: bool = False, summary: bool = False,
                 stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self.quiet = quiet
        self.summary = summary
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def document_passed(self, schema: SchemaResult, document: DocumentResult) -> None:
        if not self.quiet:
            print(f"✓ {document.document}: valid", file=self.stdout)

    def document_failed(self, schema: SchemaResult, document: DocumentResult) -> None:
        print(f'document "{document.document}": {document.message}', file=self.stderr)

    def schema_failed(self, schema: SchemaResult) -> None:
        print(f'schema "{schema.schema}": {schema.error}', file=self.stderr)

    def finished(self, result: RunResult) -> None:
        if not self.summary or self.quiet:
            return
        documents = [d for s in result.schemas for d in s.documents]
        failed = sum(1 for d in documents if not d.valid)
        broken = sum(1 for s in result.schemas if s.error)
        print("-" * 70, file=self.stdout)
        print(
            f"Schemas: {len(result.schemas)} ({broken} failed to compile)  "
            f"Documents: {len(documents)} ({failed} failed)",
            file=self.stdout,
        )


class JsonReporter(ValidationListener):
    """Collects everything and writes one JSON document at the end"""

    def __init__(self, stdout: Optional[TextIO] = None):
        self.stdout = stdout or sys.stdout

    def finished(self, result: RunResult) -> None:
        json.dump(build_report(result), self.stdout, indent=2, ensure_ascii=False)
        self.stdout.write("\n")
