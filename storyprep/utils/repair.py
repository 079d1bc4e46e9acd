"""Repair pass that folds punctuation-only pieces into neighbouring sentences."""

from typing import Callable, Iterable


def merge_standalone_punctuation(
    pieces: list[str],
    has_letter: Callable[[str], bool],
    closing_marks: Iterable[str] = (),
) -> list[str]:
    """Merge pieces that contain no letters into an adjacent sentence.

    A punctuation-only piece is appended to the previous accepted sentence.
    With no previous sentence it is prepended to the next raw piece, which
    is then evaluated in turn. With no neighbour at all it is kept as is.

    Args:
        pieces: Trimmed raw pieces from the scanner
        has_letter: Predicate telling whether a piece has linguistic content
        closing_marks: Marks that attach to the previous sentence without a
            space (an orphan danda closes the sentence before it)

    Returns:
        Repaired list of sentences in original order
    """
    closing_marks = tuple(closing_marks)
    raw = [piece.strip() for piece in pieces]
    sentences = []

    for i, piece in enumerate(raw):
        if not piece:
            continue
        if has_letter(piece):
            sentences.append(piece)
        elif sentences:
            sep = "" if closing_marks and piece.startswith(closing_marks) else " "
            sentences[-1] = f"{sentences[-1]}{sep}{piece}".strip()
        elif i + 1 < len(raw) and raw[i + 1]:
            raw[i + 1] = f"{piece} {raw[i + 1]}".strip()
        else:
            sentences.append(piece)

    return [s for s in sentences if s]
