import io
import json
import logging
from datetime import datetime

import pandas as pd

from exceptions import InvalidInputError
from models import make_json_serializable

MIMETYPES = {
    'json': 'application/json',
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
}


class ExportUtils:
    """Utility class for exporting analysis results in various formats"""

    def export(self, results, format_type, name='analysis'):
        """Export analysis results in the specified format.

        Returns (buffer, filename, mimetype); nothing is written to disk.
        """
        format_type = (format_type or '').lower()
        if format_type not in MIMETYPES:
            raise InvalidInputError(f"Unsupported export format: {format_type}")
        if not results:
            raise InvalidInputError("No analysis results to export")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{name}_{timestamp}.{format_type}"
        serializable_results = make_json_serializable(results)

        if format_type == 'json':
            buffer = self._export_json(serializable_results)
        elif format_type == 'csv':
            buffer = self._export_csv(serializable_results)
        else:
            buffer = self._export_xlsx(serializable_results)

        logging.info(f"Exported analysis results as {filename}")
        return buffer, filename, MIMETYPES[format_type]

    def _export_json(self, results):
        """Export results as JSON"""
        content = json.dumps(results, indent=2, ensure_ascii=False)
        return io.BytesIO(content.encode('utf-8'))

    def _export_csv(self, results):
        """Export results as CSV (flattened structure)"""
        frame = pd.DataFrame(self.flatten_results(results))
        return io.BytesIO(frame.to_csv(index=False).encode('utf-8'))

    def _export_xlsx(self, results):
        """Export results as a workbook with one sheet per section"""
        buffer = io.BytesIO()
        rows = self.flatten_results(results)

        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            sections = list(dict.fromkeys(row['section'] for row in rows)) or ['Analysis Results']
            for section in sections:
                section_rows = [row for row in rows if row['section'] == section]
                frame = pd.DataFrame(section_rows or [{'section': section}])
                frame.to_excel(writer, sheet_name=str(section)[:31], index=False)

        buffer.seek(0)
        return buffer

    def flatten_results(self, results):
        """Flatten nested results into rows of section, field and value"""
        if isinstance(results, list):
            results = {'results': results}

        flattened = []
        for section, content in results.items():
            if isinstance(content, list) and all(isinstance(item, dict) for item in content):
                for item in content:
                    row = {'section': section}
                    row.update({key: self._cell(value) for key, value in item.items()})
                    flattened.append(row)
            elif isinstance(content, dict):
                for field, value in self._walk(content):
                    flattened.append({'section': section, 'field': field, 'value': value})
            else:
                flattened.append({'section': section, 'field': section, 'value': self._cell(content)})

        return flattened

    def _walk(self, content, prefix=''):
        for key, value in content.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(value, dict):
                yield from self._walk(value, path)
            else:
                yield path, self._cell(value)

    def _cell(self, value):
        if isinstance(value, (list, dict)):
            return json.dumps(value, ensure_ascii=False)
        return value
