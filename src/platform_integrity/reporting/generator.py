"""
Integrity Report Generator.

Renders a verification result and the measured checksums to a standalone
HTML page using Jinja2.

Report Structure:
1. Verdict
2. Discrepancies (if any)
3. Measured checksums
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..integrity.verifier import VerificationResult


@dataclass
class IntegrityReport:
    """Complete integrity verification report."""

    report_id: str
    title: str
    generated_at: datetime
    generated_by: str
    result: VerificationResult
    checksums: dict[str, str] = field(default_factory=dict)


class ReportGenerator:
    """
    Generate HTML integrity reports.

    A custom ``integrity_report.html`` in ``template_dir`` overrides the
    embedded template.
    """

    TEMPLATE_NAME = "integrity_report.html"

    DEFAULT_TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ report.title }}</title>
    <style>
        body { font-family: 'Segoe UI', Roboto, Arial, sans-serif; color: #2d3748; background: #f7fafc; }
        .container { max-width: 900px; margin: 0 auto; padding: 2rem; }
        .verdict { padding: 1rem; border-radius: 6px; font-weight: bold; }
        .verdict.valid { background: #c6f6d5; color: #22543d; }
        .verdict.invalid { background: #fed7d7; color: #742a2a; }
        table { width: 100%; border-collapse: collapse; margin-top: 1rem; }
        th, td { text-align: left; padding: 0.4rem; border-bottom: 1px solid #e2e8f0; }
        code { font-family: monospace; font-size: 0.85rem; word-break: break-all; }
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>{{ report.title }}</h1>
            <p>Report {{ report.report_id }} | {{ report.generated_at.strftime('%Y-%m-%d %H:%M:%S UTC') }} | {{ report.generated_by }}</p>
        </header>

        <section id="verdict">
            <h2>1. Verdict</h2>
            <div class="verdict {{ 'valid' if report.result.is_valid else 'invalid' }}">
                {{ report.result.message }}
            </div>
        </section>

        {% if report.result.details.get('discrepancies') %}
        <section id="discrepancies">
            <h2>2. Discrepancies</h2>
            <table>
                <tr><th>Identifier</th><th>Change</th><th>Previous</th><th>Current</th></tr>
                {% for d in report.result.details['discrepancies'] %}
                <tr>
                    <td>{{ d.id }}</td>
                    <td>{{ d.kind }}</td>
                    <td><code>{{ d.old or 'MISSING' }}</code></td>
                    <td><code>{{ d.new or 'MISSING' }}</code></td>
                </tr>
                {% endfor %}
            </table>
        </section>
        {% endif %}

        <section id="checksums">
            <h2>3. Measured Checksums</h2>
            <table>
                <tr><th>Identifier</th><th>SHA-256</th></tr>
                {% for id, checksum in report.checksums | dictsort %}
                <tr><td>{{ id }}</td><td><code>{{ checksum }}</code></td></tr>
                {% endfor %}
            </table>
        </section>
    </div>
</body>
</html>'''

    def __init__(
        self,
        template_dir: Path | None = None,
        output_dir: Path | None = None,
    ):
        """
        Initialize report generator.

        Args:
            template_dir: Directory containing Jinja2 templates
            output_dir: Directory to save generated reports
        """
        self.template_dir = template_dir
        self.output_dir = output_dir or Path("./reports")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        if template_dir and template_dir.exists():
            self.env = Environment(
                loader=FileSystemLoader(str(template_dir)),
                autoescape=select_autoescape(["html", "xml"]),
            )
        else:
            self.env = Environment(autoescape=select_autoescape(["html", "xml"]))

    def generate_html(self, report: IntegrityReport) -> str:
        """Render the report to an HTML string."""
        if self.template_dir and (self.template_dir / self.TEMPLATE_NAME).exists():
            template = self.env.get_template(self.TEMPLATE_NAME)
        else:
            template = self.env.from_string(self.DEFAULT_TEMPLATE)

        return template.render(report=report)

    def save_html(self, report: IntegrityReport, filename: str | None = None) -> Path:
        """
        Save HTML report to file.

        Args:
            report: IntegrityReport data
            filename: Optional filename (without extension)

        Returns:
            Path to saved HTML file
        """
        html_content = self.generate_html(report)
        filename = filename or f"report_{report.report_id}"
        html_path = self.output_dir / f"{filename}.html"

        with open(html_path, "w", encoding="utf-8") as f:
            f.write(html_content)

        return html_path
