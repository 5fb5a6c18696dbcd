"""検出結果のExcel出力モジュール。"""

from datetime import datetime
from typing import Dict, List
from pathlib import Path
import logging

from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font, Alignment, Border, Side

from ..models.diagnostic import Diagnostic
from ..rules.issues import RULES, MISSING_OWNER, MISSING_START, MISSING_STOP

logger = logging.getLogger(__name__)

THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin")
)


class ExcelWriter:
    """検出結果をExcelファイルに書き込む。"""

    # 各ルールの色（RGB hex、#なし）
    RULE_COLORS: Dict[str, str] = {
        MISSING_STOP: "FFC7CE",   # 赤 - リーク
        MISSING_START: "FFEB9C",  # 黄 - 更新されない
        MISSING_OWNER: "D9D9D9",  # 灰 - 自動停止されない
    }

    HEADERS = ["ルールID", "重大度", "ファイル", "行", "列", "クラス", "フィールド", "メッセージ"]
    COLUMN_WIDTHS = [26, 10, 50, 8, 8, 24, 20, 60]

    DIAGNOSTICS_SHEET = "Diagnostics"
    SUMMARY_SHEET = "Summary"

    def __init__(self, output_file: str):
        """Excelライターを初期化する。

        Args:
            output_file: 出力Excelファイルのパス
        """
        self.output_file = Path(output_file)

    def write(self, diagnostics: List[Diagnostic]) -> None:
        """検出結果シートとサマリーシートを書き込んで保存する。

        Args:
            diagnostics: 出力する検出結果
        """
        self.output_file.parent.mkdir(parents=True, exist_ok=True)

        wb = Workbook()
        ws = wb.active
        ws.title = self.DIAGNOSTICS_SHEET

        self._write_headers(ws)
        for row_num, diagnostic in enumerate(diagnostics, 2):
            self._write_diagnostic_row(ws, row_num, diagnostic)
        self._adjust_column_widths(ws)
        ws.freeze_panes = "A2"

        self._write_summary(wb.create_sheet(self.SUMMARY_SHEET), diagnostics)

        wb.save(self.output_file)
        logger.info(f"{len(diagnostics)} diagnostics written to {self.output_file}")

    def _write_headers(self, ws) -> None:
        header_fill = PatternFill(
            start_color="4472C4",
            end_color="4472C4",
            fill_type="solid"
        )
        white_font = Font(bold=True, color="FFFFFF")
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col, header in enumerate(self.HEADERS, 1):
            cell = ws.cell(row=1, column=col)
            cell.value = header
            cell.font = white_font
            cell.alignment = header_alignment
            cell.fill = header_fill
            cell.border = THIN_BORDER

    def _write_diagnostic_row(self, ws, row_num: int, diagnostic: Diagnostic) -> None:
        """1行分の検出結果を書き込む。

        Args:
            ws: ワークシートオブジェクト
            row_num: 書き込む行番号
            diagnostic: 書き込む検出結果
        """
        location = diagnostic.location
        values = [
            diagnostic.rule_id,
            diagnostic.severity.value,
            location.file_path,
            location.line,
            location.column,
            diagnostic.class_name,
            diagnostic.field_name,
            diagnostic.message,
        ]

        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col)
            cell.value = value
            cell.border = THIN_BORDER

        color = self.RULE_COLORS.get(diagnostic.rule_id)
        if color:
            ws.cell(row=row_num, column=1).fill = PatternFill(
                start_color=color,
                end_color=color,
                fill_type="solid"
            )

        ws.cell(row=row_num, column=8).alignment = Alignment(wrap_text=True, vertical="top")

    def _adjust_column_widths(self, ws) -> None:
        for col, width in enumerate(self.COLUMN_WIDTHS, 1):
            col_letter = ws.cell(row=1, column=col).column_letter
            ws.column_dimensions[col_letter].width = width

    def _write_summary(self, ws, diagnostics: List[Diagnostic]) -> None:
        """ルールごとの件数をサマリーシートに書き込む。

        Args:
            ws: サマリー用ワークシート
            diagnostics: 全検出結果
        """
        counts: Dict[str, int] = {rule_id: 0 for rule_id in RULES}
        for diagnostic in diagnostics:
            counts[diagnostic.rule_id] = counts.get(diagnostic.rule_id, 0) + 1

        ws["A1"] = "検出結果サマリー"
        ws["A1"].font = Font(bold=True, size=14)
        ws.merge_cells("A1:C1")

        ws["A2"] = f"生成日時: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        ws.merge_cells("A2:C2")

        for col, header in enumerate(["ルールID", "件数", "説明"], 1):
            cell = ws.cell(row=4, column=col)
            cell.value = header
            cell.font = Font(bold=True)
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal="center")

        row = 5
        for rule_id, count in counts.items():
            cell_rule = ws.cell(row=row, column=1)
            cell_rule.value = rule_id
            cell_rule.border = THIN_BORDER
            color = self.RULE_COLORS.get(rule_id)
            if color:
                cell_rule.fill = PatternFill(
                    start_color=color,
                    end_color=color,
                    fill_type="solid"
                )

            cell_count = ws.cell(row=row, column=2)
            cell_count.value = count
            cell_count.alignment = Alignment(horizontal="right")
            cell_count.border = THIN_BORDER

            cell_summary = ws.cell(row=row, column=3)
            rule = RULES.get(rule_id)
            cell_summary.value = rule.summary if rule else ""
            cell_summary.border = THIN_BORDER

            row += 1

        cell_total_label = ws.cell(row=row, column=1)
        cell_total_label.value = "合計"
        cell_total_label.font = Font(bold=True)
        cell_total_label.border = THIN_BORDER

        cell_total_count = ws.cell(row=row, column=2)
        cell_total_count.value = len(diagnostics)
        cell_total_count.font = Font(bold=True)
        cell_total_count.alignment = Alignment(horizontal="right")
        cell_total_count.border = THIN_BORDER

        ws.column_dimensions["A"].width = 26
        ws.column_dimensions["B"].width = 10
        ws.column_dimensions["C"].width = 70
