"""
Label annotation arithmetic.

A playlist's labels are a sparse mapping from position to text, where the
text at position i is shown before the video at index i. When videos are
inserted or removed the positions have to be renumbered so every label
stays attached to the same video. These functions do that renumbering on
plain dicts and never touch the video list; PlaylistRegistry calls them in
the same step as the list mutation.

When two labels land on the same position they are merged into one
multi-line label, with the text already at the destination first and the
moved text after it.
"""

NEW_LABEL = "New"


def merge_label(labels: dict[int, str], position: int, text: str) -> None:
    """Attach text at position, appending to an existing label there."""
    existing = labels.get(position)
    if existing is None:
        labels[position] = text
    else:
        labels[position] = f"{existing}\n{text}"


def _shift(labels: dict[int, str], moved: dict[int, int]) -> dict[int, str]:
    result = {position: text for position, text in labels.items() if position not in moved}
    for position in sorted(moved):
        merge_label(result, moved[position], labels[position])
    return result


def shift_for_insert(labels: dict[int, str], index: int) -> dict[int, str]:
    """
    Renumber labels for a video inserted at index.
    
    Labels at positions >= index move forward by one; the ones before the
    insertion point are unaffected.
    
    Example:
        shift_for_insert({0: "A", 2: "B"}, 1)  # {0: "A", 3: "B"}
    """
    return _shift(labels, {p: p + 1 for p in labels if p >= index})


def shift_for_remove(labels: dict[int, str], index: int) -> dict[int, str]:
    """
    Renumber labels for the video removed from index.
    
    Labels at positions > index move back by one. A label at exactly index
    stays put, so when index + 1 also had a label the two are merged.
    
    Example:
        shift_for_remove({0: "A", 3: "B"}, 1)  # {0: "A", 2: "B"}
        shift_for_remove({1: "A", 2: "B"}, 1)  # {1: "A\\nB"}
    """
    return _shift(labels, {p: p - 1 for p in labels if p > index})


def find_label(labels: dict[int, str], text: str) -> int | None:
    """Position of the first label whose text equals text exactly."""
    for position in sorted(labels):
        if labels[position] == text:
            return position
    return None


def next_label_position(labels: dict[int, str], position: int) -> int | None:
    """Smallest label position strictly greater than position."""
    following = [p for p in labels if p > position]
    return min(following) if following else None
