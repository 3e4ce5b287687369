"""
Console rendering of boards for progress reports.
"""

from .board import Board

EMPTY_CELL = "░░"
FILLED_CELL = "██"


def render_board(board: Board, color: bool = True) -> str:
    """
    Draw the board two characters per cell.

    With color=True occupied cells are ANSI-coloured blocks (red, green,
    yellow, blue for colours 0-3); otherwise the plain text form is used.
    """
    if not color:
        return str(board)
    lines = []
    for row in range(board.rows):
        line = ""
        for col in range(board.cols):
            occupant = board.at(board.index(row, col))
            if occupant is None:
                line += EMPTY_CELL
            else:
                line += f"\x1b[{31 + occupant}m{FILLED_CELL}\x1b[0m"
        lines.append(line)
    return "\n".join(lines)
