'''Sorting of occurrence offsets and detection of tandem repeats.

A tandem repeat here is a maximal run of two or more occurrences of the same
pattern where each occurrence starts exactly one pattern length after the
previous one, i.e. back-to-back, non-overlapping copies. Each run is reported as
the `(start, end)` pair of its first and last occurrence offsets.

Example:
    >>> find_tandem_repeats([13, 5, 20, 9], 4)
    [(5, 13)]
'''


def merge_sort(values: list[int]) -> list[int]:
    """Returns a new list with `values` in ascending order (stable, O(n log n))."""
    if len(values) <= 1:
        return list(values)

    mid = len(values) // 2
    left = merge_sort(values[:mid])
    right = merge_sort(values[mid:])

    merged = []
    i = j = 0
    while i < len(left) and j < len(right):
        if left[i] <= right[j]:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def find_tandem_repeats(occurrences, pattern_length: int) -> list[tuple[int, int]]:
    """Finds every maximal run of occurrences spaced exactly `pattern_length` apart.

    Args:
        occurrences: Start offsets of a pattern, in any order. Duplicates are ignored.
        pattern_length: Length of the pattern the offsets belong to.

    Returns:
        A list of `(start, end)` spans in ascending order. Runs of a single
        occurrence are not reported.

    Raises:
        ValueError: If `pattern_length` is not positive.
    """
    if pattern_length <= 0:
        raise ValueError("pattern_length must be a positive integer.")

    positions = merge_sort(list(set(occurrences)))
    spans = []
    run_start = None
    for previous, current in zip(positions, positions[1:]):
        if current - previous == pattern_length:
            if run_start is None:
                run_start = previous
        elif run_start is not None:
            spans.append((run_start, previous))
            run_start = None
    if run_start is not None:
        spans.append((run_start, positions[-1]))
    return spans
