"""Excel scoresheet export."""

import logging
from pathlib import Path

import openpyxl
from openpyxl.styles import Font

from .constants import (
    SCORESHEET_FIRST_DATA_ROW,
    SCORESHEET_ROSTER_SHEET_NAME,
    SCORESHEET_SHEET_NAME,
    SCORESHEET_TEAM_COLUMNS,
    SCORESHEET_TOTAL_COLUMNS,
)
from .game import GameState

logger = logging.getLogger('qbscore.scoresheet')


def export_scoresheet(game: GameState, excel_path: str | Path) -> None:
    """
    Write the match's score history to an Excel workbook.

    The "Scoresheet" sheet has one row per cycle:
        Question | Tossup | <team 1> TU | <team 1> Bonus | <team 2> TU |
        <team 2> Bonus | <team 1> Total | <team 2> Total
    Starters on the "Roster" sheet are bold, matching how lineups are
    marked on paper scoresheets.

    Args:
        game: Match to export
        excel_path: Path to the workbook (overwritten if it exists)
    """
    team_names = game.team_names
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SCORESHEET_SHEET_NAME

    ws.cell(row=1, column=1, value='Question')
    ws.cell(row=1, column=2, value='Tossup')
    for team_name, (tossup_col, bonus_col), total_col in zip(
        team_names, SCORESHEET_TEAM_COLUMNS, SCORESHEET_TOTAL_COLUMNS
    ):
        ws.cell(row=1, column=tossup_col, value=f'{team_name} TU')
        ws.cell(row=1, column=bonus_col, value=f'{team_name} Bonus')
        ws.cell(row=1, column=total_col, value=f'{team_name} Total')
    for cell in ws[1]:
        cell.font = Font(bold=True)

    scores = game.cumulative_scores()
    for cycle_index, totals in enumerate(scores):
        row = SCORESHEET_FIRST_DATA_ROW + cycle_index
        _, breakdown = game.score_breakdown(cycle_index)

        ws.cell(row=row, column=1, value=cycle_index + 1)
        ws.cell(row=row, column=2, value=game.tossup_index(cycle_index) + 1)
        for team_name, (tossup_col, bonus_col), total_col, total in zip(
            team_names, SCORESHEET_TEAM_COLUMNS, SCORESHEET_TOTAL_COLUMNS, totals
        ):
            ws.cell(row=row, column=tossup_col, value=breakdown[team_name]['tossup'])
            ws.cell(row=row, column=bonus_col, value=breakdown[team_name]['bonus'])
            ws.cell(row=row, column=total_col, value=total)

    roster_ws = wb.create_sheet(SCORESHEET_ROSTER_SHEET_NAME)
    for col, team_name in enumerate(team_names, start=1):
        roster_ws.cell(row=1, column=col, value=team_name).font = Font(bold=True)
        for row, player in enumerate(game.get_players(team_name), start=2):
            cell = roster_ws.cell(row=row, column=col, value=player.name)
            cell.font = Font(bold=player.is_starter)

    excel_path = Path(excel_path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(excel_path)
    logger.info(f'Scoresheet saved to {excel_path}')


def read_scoresheet_totals(
    excel_path: str | Path, sheet_name: str = SCORESHEET_SHEET_NAME
) -> list[tuple[int, int]]:
    """
    Read the running totals back out of a scoresheet.

    Useful for checking a hand-kept scoresheet against the computed score.

    Returns:
        One (team 1 total, team 2 total) tuple per question row
    """
    wb = openpyxl.load_workbook(excel_path)
    ws = wb[sheet_name]

    totals = []
    first_col, second_col = SCORESHEET_TOTAL_COLUMNS
    for row in range(SCORESHEET_FIRST_DATA_ROW, ws.max_row + 1):
        question = ws.cell(row=row, column=1).value
        if question is None:
            break
        first = ws.cell(row=row, column=first_col).value or 0
        second = ws.cell(row=row, column=second_col).value or 0
        totals.append((int(first), int(second)))

    wb.close()
    return totals
