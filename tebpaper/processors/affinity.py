"""
Reader/source leaning affinity
"""
from typing import Sequence

from tebpaper.utils.constants import LeaningConstants


def leaning_affinity(
    reader_leaning: str,
    source_leaning: str,
    spectrum: Sequence[str] = LeaningConstants.SPECTRUM,
) -> float:
    """
    Score how well a source's leaning suits a reader, from 0.0 to 1.0.

    Identical labels score 1.0 and the two poles of the spectrum score 0.0,
    with linear decay for every step in between. On the default five-label
    spectrum neighbours score 0.75 and labels two steps apart 0.5. Labels
    that are not on the spectrum get a neutral 0.5.
    """
    if reader_leaning not in spectrum or source_leaning not in spectrum:
        return LeaningConstants.NEUTRAL_AFFINITY
    if len(spectrum) < 2:
        return 1.0

    step = 1.0 / (len(spectrum) - 1)
    distance = abs(spectrum.index(reader_leaning) - spectrum.index(source_leaning))
    return max(0.0, 1.0 - distance * step)
