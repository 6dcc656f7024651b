import os
import logging
from datetime import datetime
from typing import List

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from models import Student
from validators import SEMESTERS


class ExcelHandler:
    def __init__(self, export_folder: str = 'exports'):
        self.logger = logging.getLogger(__name__)
        self.export_folder = export_folder
        os.makedirs(export_folder, exist_ok=True)

    def students_to_dataframe(self, students: List[Student]) -> pd.DataFrame:
        """
        One row per student. Each semester column holds the comma joined
        marks; Total and Average cover every mark across all semesters.
        """
        rows = []
        for student in students:
            all_marks = [mark for semester in SEMESTERS for mark in student.marks.get(semester, [])]
            row = {
                'Reg No': student.reg_no,
                'Name': student.name,
                'Department': student.department,
                'Date of Birth': student.dob,
            }
            for semester in SEMESTERS:
                row[semester.upper()] = ', '.join(str(mark) for mark in student.marks.get(semester, []))
            row['Total'] = sum(all_marks)
            row['Average'] = round(sum(all_marks) / len(all_marks), 2) if all_marks else None
            rows.append(row)

        columns = ['Reg No', 'Name', 'Department', 'Date of Birth']
        columns += [semester.upper() for semester in SEMESTERS] + ['Total', 'Average']
        return pd.DataFrame(rows, columns=columns)

    def export_students(self, students: List[Student]) -> str:
        """
        Export the student roster to an Excel file and return its path.
        """
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        filepath = os.path.join(self.export_folder, f"students_export_{timestamp}.xlsx")

        df = self.students_to_dataframe(students)
        df.to_excel(filepath, index=False, sheet_name='Students', engine='openpyxl')
        self._style_sheet(filepath, len(df.columns))

        self.logger.info(f"Exported {len(df)} students to {filepath}")
        return filepath

    def _style_sheet(self, filepath: str, column_count: int) -> None:
        wb = load_workbook(filepath)
        ws = wb.active

        header_font = Font(bold=True, size=12, color="FFFFFF")
        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        center_alignment = Alignment(horizontal='center', vertical='center')

        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = center_alignment

        for row in ws.iter_rows(min_row=1, max_row=ws.max_row, max_col=column_count):
            for cell in row:
                cell.border = border

        # Auto-adjust column widths
        for col_idx in range(1, column_count + 1):
            column_letter = get_column_letter(col_idx)
            max_length = max(
                (len(str(cell.value)) for cell in ws[column_letter] if cell.value is not None),
                default=0
            )
            ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

        ws.freeze_panes = 'A2'
        wb.save(filepath)
