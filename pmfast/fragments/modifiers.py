"""Post-processing steps for predicted peak lists.

A modifier is any callable taking a list of FragmentPeak and changing it in
place. Attach one to a fragmenter (`PMFFragmenter(..., modifier=...)`) and it
runs once at the end of every `predict_spectrum()` call.

Examples
--------
>>> fragmenter.modifier = ChainModifier(
...     FilterModifier(min_mass=500.0, max_mass=4000.0),
...     SortModifier("mass"),
...     UnificationModifier(),
... )
"""

from typing import List, Optional

from .peaks import FragmentPeak

PEAK_KEYS = ('mass', 'start', 'length', 'miscleavage_count')


class SortModifier:
    """Stable in-place sort by one peak attribute.

    Parameters
    ----------
    key : str
        'mass' (default), 'start', 'length' or 'miscleavage_count'
    reverse : bool
        Sort descending
    """

    def __init__(self, key: str = 'mass', reverse: bool = False):
        if key not in PEAK_KEYS:
            raise ValueError(f"Unknown sort key: {key}. Must be one of {PEAK_KEYS}")
        self.key = key
        self.reverse = reverse

    def __call__(self, peaklist: List[FragmentPeak]) -> None:
        peaklist.sort(key=lambda peak: getattr(peak, self.key), reverse=self.reverse)


class UnificationModifier:
    """Remove peaks whose mass was already seen.

    The first occurrence is kept and the order of the kept peaks is
    preserved. With tolerance > 0, a peak counts as duplicate if its mass
    lies within tolerance of any kept peak.
    """

    def __init__(self, tolerance: float = 0.0):
        self.tolerance = tolerance

    def __call__(self, peaklist: List[FragmentPeak]) -> None:
        if self.tolerance <= 0:
            seen = set()
            unique = []
            for peak in peaklist:
                if peak.mass not in seen:
                    seen.add(peak.mass)
                    unique.append(peak)
        else:
            unique = []
            for peak in peaklist:
                if all(abs(peak.mass - kept.mass) > self.tolerance for kept in unique):
                    unique.append(peak)
        peaklist[:] = unique


class FilterModifier:
    """Keep only peaks inside the given bounds (all inclusive, None = open)."""

    def __init__(
        self,
        min_mass: Optional[float] = None,
        max_mass: Optional[float] = None,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        max_miscleavages: Optional[int] = None,
    ):
        self.min_mass = min_mass
        self.max_mass = max_mass
        self.min_length = min_length
        self.max_length = max_length
        self.max_miscleavages = max_miscleavages

    def accepts(self, peak: FragmentPeak) -> bool:
        if self.min_mass is not None and peak.mass < self.min_mass:
            return False
        if self.max_mass is not None and peak.mass > self.max_mass:
            return False
        if self.min_length is not None and peak.length < self.min_length:
            return False
        if self.max_length is not None and peak.length > self.max_length:
            return False
        if self.max_miscleavages is not None and peak.miscleavage_count > self.max_miscleavages:
            return False
        return True

    def __call__(self, peaklist: List[FragmentPeak]) -> None:
        peaklist[:] = [peak for peak in peaklist if self.accepts(peak)]


class ChainModifier:
    """Apply several modifiers in order."""

    def __init__(self, *modifiers):
        self.modifiers = list(modifiers)

    def __call__(self, peaklist: List[FragmentPeak]) -> None:
        for modifier in self.modifiers:
            modifier(peaklist)
