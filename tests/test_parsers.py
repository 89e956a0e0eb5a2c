import io

import pandas as pd
import pytest

from exceptions import InvalidInputError
from parsers.csv_parser import CSVParser
from parsers.excel_parser import ExcelParser
from parsers.file_parser import FileParserFactory


def workbook_bytes(**sheets):
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=name, index=False)
    return buffer.getvalue()


class TestCSVParser:

    def test_blank_and_null_cells_become_none(self):
        table = CSVParser().parse(b"name,value\nA,1\nB,\nC,NULL\n")

        assert table.columns == ['name', 'value']
        assert table.column('name') == ['A', 'B', 'C']
        assert table.column('value') == [1.0, None, None]

    def test_whitespace_is_stripped(self):
        table = CSVParser().parse(b"city,code\n  Oslo  ,x1\n")
        assert table.rows == [{'city': 'Oslo', 'code': 'x1'}]

    def test_semicolon_separator_is_detected(self):
        table = CSVParser().parse(b"a;b\n1;2\n3;4\n")

        assert table.columns == ['a', 'b']
        assert table.column('b') == [2, 4]

    def test_latin1_file(self):
        table = CSVParser().parse("ville,prix\nZürich,3\n".encode('latin-1'))
        assert table.column('ville') == ['Zürich']

    def test_file_object_source(self):
        table = CSVParser().parse(io.BytesIO(b"x,y\n1,2\n"))
        assert len(table) == 1

    def test_header_only_file_is_rejected(self):
        with pytest.raises(InvalidInputError):
            CSVParser().parse(b"x,y\n")


class TestExcelParser:

    def test_largest_sheet_is_used(self):
        content = workbook_bytes(
            Summary=pd.DataFrame({'total': [3]}),
            Data=pd.DataFrame({'region': ['North', 'South', 'N/A'], 'units': [1, 2, 3]}),
        )
        table = ExcelParser().parse(content)

        assert table.columns == ['region', 'units']
        assert table.column('region') == ['North', 'South', None]

    def test_unnamed_columns_are_renamed(self):
        content = workbook_bytes(Sheet1=pd.DataFrame({'Unnamed: 0': [1, 2], 'value': [3, 4]}))
        assert ExcelParser().parse(content).columns == ['Column_0', 'value']

    def test_corrupt_workbook_is_rejected(self):
        with pytest.raises(InvalidInputError):
            ExcelParser().parse(b"not a workbook")


class TestFileParserFactory:

    @pytest.mark.parametrize('file_type, parser_type', [
        ('csv', CSVParser), ('.XLSX', ExcelParser), ('xls', ExcelParser),
    ])
    def test_get_parser(self, file_type, parser_type):
        assert isinstance(FileParserFactory().get_parser(file_type), parser_type)

    @pytest.mark.parametrize('filename', ['data.sql', 'data.xml', 'data'])
    def test_unsupported_uploads(self, filename):
        with pytest.raises(InvalidInputError):
            FileParserFactory().parse_upload(filename, io.BytesIO(b"a,b\n1,2\n"))

    def test_parse_upload_by_extension(self):
        table = FileParserFactory().parse_upload('report.CSV', io.BytesIO(b"a,b\n1,2\n"))
        assert table.rows == [{'a': 1, 'b': 2}]
