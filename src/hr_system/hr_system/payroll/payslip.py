from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..employees.model import Employee
from .model import SalaryRecord

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"


class DocumentGenerator(Protocol):
    def render_payslip(self, record: SalaryRecord, employee: Employee) -> str:
        """Render the payslip and return a pointer (path) to the artifact."""

        raise NotImplementedError


class HtmlPayslipGenerator(DocumentGenerator):
    """Writes an HTML payslip per salary record into ``output_dir``."""

    def __init__(self, output_dir: Union[str, Path]):
        self._output_dir = Path(output_dir)
        self._env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def render_payslip(self, record: SalaryRecord, employee: Employee) -> str:
        html = self._env.get_template("payslip.html").render(record=record, employee=employee)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / f"payslip_{record.emp_code}_{record.month}_{record.year}.html"
        path.write_text(html, encoding="utf-8")
        return str(path)
